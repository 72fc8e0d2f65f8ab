"""
どこで: `engine.core` サブパッケージ。
何を: フレーム駆動（Tickable/FrameClock）と描画ウィンドウを提供。
なぜ: アプリのライフサイクル（更新/描画）を支える基盤を上位層から再利用可能にするため。
"""
