"""grouper / filename_parser のユニットテスト。"""
from sneaker_import.identify.filename_parser import parse_filename
from sneaker_import.job.grouper import build_groups, group_key
from sneaker_import.job.models import SourceImage


def _images(*names):
    return [SourceImage(filename=n, size_bytes=10, modified_at=1.0) for n in names]


def test_camera_roll_images_bucket_by_decade():
    groups = build_groups(_images("IMG_9751.jpg", "IMG_9753.jpg", "IMG_9765.jpg"))
    assert list(groups) == ["img-9750", "img-9760"]
    assert groups["img-9750"].filenames() == ["IMG_9751.jpg", "IMG_9753.jpg"]
    assert groups["img-9760"].filenames() == ["IMG_9765.jpg"]


def test_camera_roll_variants_share_bucket():
    assert group_key("IMG_9751.HEIC") == "img-9750"
    assert group_key("img-9759.jpg") == "img-9750"
    assert group_key("IMG9750.png") == "img-9750"


def test_direction_suffixes_collapse_into_one_group():
    groups = build_groups(_images("nike-dunk-front.jpg", "nike-dunk-side.jpg", "nike_dunk_3.JPG"))
    assert list(groups) == ["nike-dunk"]
    assert groups["nike-dunk"].image_count == 3


def test_photo_suffix_and_trailing_digits_are_stripped():
    assert group_key("vans old skool photo2.jpg") == "vans-old-skool"
    assert group_key("asics-kayano-image.png") == "asics-kayano"
    assert group_key("converse-chuck-12.jpg") == "converse-chuck-"


def test_group_key_truncated_to_forty_chars():
    key = group_key("a-very-long-descriptive-sneaker-filename-that-keeps-going.jpg")
    assert len(key) == 40


def test_unrecognized_files_are_ignored():
    groups = build_groups(_images("notes.txt", "nike-dunk-1.jpg", ".DS_Store"))
    assert list(groups) == ["nike-dunk"]


def test_group_preserves_listing_order():
    groups = build_groups(_images("nike-dunk-b.jpg", "nike-dunk-a.jpg"))
    assert groups["nike-dunk"].filenames() == ["nike-dunk-b.jpg", "nike-dunk-a.jpg"]


def test_group_defaults_come_from_first_filename():
    groups = build_groups(_images("nike-dunk-low-white-1.jpg", "nike-dunk-low-white-2.jpg"))
    group = groups["nike-dunk-low-white"]
    assert group.inferred_brand == "Nike"
    assert group.inferred_model == "Dunk"
    assert group.inferred_description == "low white 1"


def test_parse_filename_unknown_brand():
    parsed = parse_filename("IMG_9751.jpg")
    assert parsed.brand == "Unknown Brand"
    assert parsed.model == "IMG 9751"
    assert parsed.description == "IMG_9751"


def test_parse_filename_model_after_brand():
    parsed = parse_filename("hoka-bondi-8-blue.jpg")
    assert parsed.brand == "Hoka"
    assert parsed.model == "bondi 8"
    assert parsed.description == "blue"
