"""設定読み込みと ImportParams のテスト。"""
import yaml

from sneaker_import.config import default_config, load_config, save_config
from sneaker_import.job.params import ImportParams


def test_missing_file_returns_defaults(tmp_path, monkeypatch):
    for key in ("SHOES_DIR", "UPLOADS_DIR", "PROCESSED_FILE", "STATE_DB_PATH", "AUTO_IMPORT_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    config = load_config(str(tmp_path / "nope.yaml"))
    assert config == default_config()


def test_partial_file_is_merged_with_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("AUTO_IMPORT_ENABLED", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"import": {"batch_size": 10}}), encoding="utf-8")

    config = load_config(str(path))

    assert config["import"]["batch_size"] == 10
    assert config["import"]["similarity_threshold"] == 0.85
    assert config["defaults"]["msrp"] == 120


def test_broken_yaml_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("AUTO_IMPORT_ENABLED", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("import: [unclosed", encoding="utf-8")
    assert load_config(str(path))["import"] == default_config()["import"]


def test_env_overrides_paths_and_enabled(tmp_path, monkeypatch):
    monkeypatch.setenv("SHOES_DIR", str(tmp_path / "drop"))
    monkeypatch.setenv("AUTO_IMPORT_ENABLED", "false")
    config = load_config(str(tmp_path / "nope.yaml"))
    assert config["paths"]["shoes_dir"] == str(tmp_path / "drop")
    assert config["import"]["enabled"] is False


def test_save_and_reload(tmp_path, monkeypatch):
    monkeypatch.delenv("AUTO_IMPORT_ENABLED", raising=False)
    path = tmp_path / "config.yaml"
    config = default_config()
    config["import"]["debounce_sec"] = 2
    save_config(config, str(path))
    assert load_config(str(path))["import"]["debounce_sec"] == 2


def test_params_from_defaults():
    params = ImportParams.from_config(default_config())
    assert params.batch_size == 50
    assert params.similarity_threshold == 0.85
    assert params.debounce_sec == 5
    assert params.enabled is True


def test_params_clamp_invalid_values():
    params = ImportParams.from_config(
        {"import": {"batch_size": 0, "similarity_threshold": 1.7, "min_images_per_listing": 0, "batch_pause_sec": -1}}
    )
    assert params.batch_size == 50
    assert params.similarity_threshold == 1.0
    assert params.min_images_per_listing == 1
    assert params.batch_pause_sec == 0.0
