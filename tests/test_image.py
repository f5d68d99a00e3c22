"""HEIC 変換ユーティリティのテスト。"""
from PIL import Image

from sneaker_import.util import image


def _fake_heic(path):
    # 中身は PNG（Pillow は拡張子ではなくヘッダで形式を判定する）
    Image.new("RGBA", (4, 4), (255, 0, 0, 255)).save(path, format="PNG")


def test_is_convertible_case_insensitive():
    assert image.is_convertible("IMG_9751.HEIC")
    assert image.is_convertible("a.heif")
    assert not image.is_convertible("a.jpg")


def test_convert_writes_jpg_next_to_original(tmp_path):
    src = tmp_path / "IMG_9751.heic"
    _fake_heic(src)

    assert image.convert_heic_to_jpg(src) == "IMG_9751.jpg"
    assert (tmp_path / "IMG_9751.jpg").is_file()
    assert src.exists()


def test_convert_failure_returns_original_name(tmp_path):
    src = tmp_path / "broken.heic"
    src.write_bytes(b"not an image")

    assert image.convert_heic_to_jpg(src) == "broken.heic"
    assert not (tmp_path / "broken.jpg").exists()


def test_convert_and_replace_deletes_only_on_success(tmp_path):
    good = tmp_path / "good.heic"
    bad = tmp_path / "bad.heic"
    _fake_heic(good)
    bad.write_bytes(b"garbage")

    assert image.convert_and_replace(good, delete_original=True) == "good.jpg"
    assert not good.exists()
    assert image.convert_and_replace(bad, delete_original=True) == "bad.heic"
    assert bad.exists()
