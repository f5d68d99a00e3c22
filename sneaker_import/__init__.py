"""スニーカー画像の自動取り込みパイプライン。"""
