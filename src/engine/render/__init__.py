"""
どこで: `engine.render` サブパッケージ。
何を: `FrameResult` を消費するアダプタ契約と、2D タイル / 3D インスタンスのデータ変換。
なぜ: 実際の描画呼び出しから切り離し、両バックエンドが同じ出力を同じ形で受け取るため。
"""
