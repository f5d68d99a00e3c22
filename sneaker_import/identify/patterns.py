"""ブランド・モデル・色・価格帯のキーワード表。dict の順序がそのまま判定の優先順位。"""
from __future__ import annotations

from typing import Mapping

# brand -> {"keywords": [...], "models": {model: [keywords...]}}
BRAND_PATTERNS: Mapping[str, Mapping[str, object]] = {
    "Nike": {
        "keywords": ("nike", "dunk", "air force", "air max", "jordan", "jordan brand"),
        "models": {
            "Dunk Low": ("dunk low", "dunk-low"),
            "Dunk High": ("dunk high", "dunk-high"),
            "Air Force 1": ("air force", "af1", "air force 1"),
            "Air Max": ("air max", "airmax"),
            "Jordan 1": ("jordan 1", "aj1"),
            "Jordan 4": ("jordan 4", "aj4"),
        },
    },
    "New Balance": {
        "keywords": ("new balance", "nb", "newbalance"),
        "models": {
            "990v5": ("990v5", "990 v5"),
            "990v4": ("990v4", "990 v4"),
            "991": ("991",),
            "992": ("992",),
            "993": ("993",),
            "574": ("574",),
            "550": ("550",),
            "327": ("327",),
        },
    },
    "adidas": {
        "keywords": ("adidas", "adidas originals"),
        "models": {
            "Ultraboost": ("ultraboost", "ultra boost"),
            "Stan Smith": ("stan smith",),
            "Superstar": ("superstar",),
            "Yeezy": ("yeezy",),
            "Samba": ("samba",),
        },
    },
    "On": {
        "keywords": ("on", "on cloud", "oncloud"),
        "models": {
            "Cloud": ("cloud",),
            "Cloudrunner": ("cloudrunner", "cloud runner"),
            "Cloudflow": ("cloudflow", "cloud flow"),
            "Cloudswift": ("cloudswift", "cloud swift"),
            "Cloudventure": ("cloudventure", "cloud venture"),
        },
    },
    "Olukai": {
        "keywords": ("olukai", "olukia"),
        "models": {
            "Mio Li": ("mio li", "mioli"),
            "Ohana": ("ohana",),
            "Nohea": ("nohea",),
        },
    },
    "Asics": {
        "keywords": ("asics", "asics gel"),
        "models": {
            "Gel-Kayano": ("kayano", "gel kayano"),
            "Gel-Nimbus": ("nimbus", "gel nimbus"),
            "Gel-Cumulus": ("cumulus", "gel cumulus"),
        },
    },
    "LOWE": {"keywords": ("lowe",), "models": {}},
    "Puma": {"keywords": ("puma",), "models": {}},
    "Vans": {
        "keywords": ("vans",),
        "models": {
            "Old Skool": ("old skool", "oldskool"),
            "Authentic": ("authentic",),
            "Sk8-Hi": ("sk8", "sk8-hi"),
        },
    },
    "Converse": {
        "keywords": ("converse",),
        "models": {
            "Chuck Taylor": ("chuck", "chuck taylor"),
        },
    },
}

# 多言語の略記を含む。最初に一致した色だけを採用する。
COLOR_PATTERNS: Mapping[str, tuple[str, ...]] = {
    "White": ("white", "wht", "blanc", "bianco"),
    "Black": ("black", "blk", "noir", "nero"),
    "Grey": ("grey", "gray", "gry", "gris"),
    "Navy": ("navy", "navy blue"),
    "Red": ("red", "rd", "rouge", "rosso"),
    "Blue": ("blue", "blu", "bleu"),
    "Green": ("green", "grn", "vert", "verde"),
    "Orange": ("orange", "org", "orng"),
    "Pink": ("pink", "pnk"),
    "Brown": ("brown", "brn", "brwn"),
    "Beige": ("beige", "tan", "khaki"),
    "Yellow": ("yellow", "ylw", "yel"),
}

# brand -> model -> (min, max)。"default" はブランド内の既定レンジ。
MSRP_TABLE: Mapping[str, Mapping[str, tuple[int, int]]] = {
    "Nike": {
        "Dunk Low": (100, 120),
        "Dunk High": (110, 130),
        "Air Force 1": (90, 110),
        "Air Max": (120, 180),
        "default": (90, 200),
    },
    "New Balance": {
        "990": (185, 220),
        "991": (180, 210),
        "992": (180, 210),
        "993": (180, 210),
        "574": (80, 100),
        "550": (100, 120),
        "327": (80, 100),
        "default": (100, 220),
    },
    "adidas": {
        "Ultraboost": (180, 220),
        "Stan Smith": (80, 100),
        "Superstar": (80, 100),
        "Yeezy": (200, 300),
        "default": (80, 200),
    },
    "On": {
        "Cloudrunner": (130, 150),
        "Cloudflow": (140, 160),
        "Cloud": (120, 140),
        "default": (120, 180),
    },
    "Olukai": {
        "Mio Li": (100, 130),
        "default": (100, 150),
    },
    "Asics": {
        "default": (90, 160),
    },
    "Jordan": {
        "default": (150, 250),
    },
}

# ブランドは分かるがレンジ表にモデルも default もない場合
BRAND_FALLBACK_BAND = (100, 150)
# ブランド不明時。中央値 120 が既定 MSRP
GLOBAL_DEFAULT_MSRP = 120

RESALE_RATIO = 0.80

# 確信度が低いときのモデル補完。型番 → キーワード全一致の順で探す
MODEL_NUMBER_HINTS = ("990", "991", "992", "993", "574", "550", "327")
MODEL_KEYWORD_HINTS: Mapping[str, tuple[str, ...]] = {
    "Dunk Low": ("dunk", "low"),
    "Dunk High": ("dunk", "high"),
    "Air Force 1": ("force", "af1"),
    "Cloudrunner": ("cloudrunner", "cloud", "runner"),
    "Cloudflow": ("cloudflow", "flow"),
    "Mio Li": ("mio", "li"),
}

# 表示用ファイル名パーサのブランド・モデル一覧（BRAND_PATTERNS とは別管理）
DISPLAY_BRANDS = (
    "Nike", "New Balance", "adidas", "On", "On Cloud", "Olukai", "Asics",
    "LOWE", "Puma", "Vans", "Converse", "Hoka", "Brooks", "Saucony", "Jordan",
)
DISPLAY_MODELS = (
    "Dunk", "Dunk Low", "Dunk High", "Air Force", "Air Max",
    "990", "991", "992", "993", "574", "550", "327",
    "Ultraboost", "Stan Smith", "Superstar", "Yeezy",
    "Chuck Taylor", "Old Skool", "Authentic", "Sk8-Hi",
    "Cloud", "Cloudrunner", "Cloudflow", "Cloudswift", "Cloudventure",
)

DEFAULT_SIZE = "9"
DEFAULT_GENDER = "Mens"
DEFAULT_CONDITION = "Excellent"
