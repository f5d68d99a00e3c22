"""出品の類似度判定。"""
