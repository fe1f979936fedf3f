"""
どこで: `engine.core` サブパッケージ。
何を: Clock・位置計算・折返し写像・フォーカス・末尾生成・フレーム駆動（Tickable/FrameLoop）を提供。
なぜ: 描画バックエンドに依存しない純粋な計算基盤を構成し、上位層（render/api）から再利用可能にするため。
"""
