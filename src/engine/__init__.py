"""
どこで: `engine` パッケージ。
何を: 純粋計算の `engine.core` と、描画データ変換の `engine.render`。
"""
