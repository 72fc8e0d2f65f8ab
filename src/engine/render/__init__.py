"""
どこで: `engine.render` サブパッケージ。
何を: スプライトバッチ（単位クアッドのインスタンス描画）・ピクセルテクスチャ・シェーダを提供。
なぜ: プリミティブ計算と描画の責務を分離し、GPU リソース管理を局所化するため。
"""
