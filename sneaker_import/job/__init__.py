"""取り込みジョブ（グループ化・照合・永続化・スケジューリング）。"""
