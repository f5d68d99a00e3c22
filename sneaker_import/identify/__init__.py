"""ファイル名からのブランド・モデル推定。"""
