"""
どこで: `util` パッケージ。
何を: 色変換・設定ファイル読込などの依存の少ないヘルパ群。
"""
