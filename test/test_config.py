import json
import pytest

from toolcal.config import DEFAULT_CONFIG_PATH, CalibrationSettings, load_settings, save_settings


def test_shipped_config_matches_defaults():
    assert load_settings(DEFAULT_CONFIG_PATH) == CalibrationSettings()


def test_save_and_load(tmp_path):
    settings = CalibrationSettings(iterations=5000, precision=1e-4, damping=0.2, z_initial=100.0)
    path = tmp_path / "config" / "settings.json"

    save_settings(settings, path)

    assert load_settings(path) == settings


def test_missing_keys_keep_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"damping": 0.5}))

    settings = load_settings(path)

    assert settings.damping == 0.5
    assert settings.iterations == 400000


def test_unknown_key(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"dampnig": 0.5}))

    with pytest.raises(ValueError, match="dampnig"):
        load_settings(path)


def test_invalid_value():
    with pytest.raises(ValueError, match="iterations"):
        CalibrationSettings.from_dict({"iterations": "many"})


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.json")


@pytest.mark.parametrize("content", ["[1, 2]", "null", "\"damping\""])
def test_settings_must_be_an_object(tmp_path, content):
    path = tmp_path / "settings.json"
    path.write_text(content)

    with pytest.raises(ValueError, match="JSON object"):
        load_settings(path)


@pytest.mark.parametrize("value", [2.7, True, "many"])
def test_iterations_must_be_an_integer(value):
    with pytest.raises(ValueError, match="iterations"):
        CalibrationSettings.from_dict({"iterations": value})


def test_whole_float_is_accepted_for_iterations():
    settings = CalibrationSettings.from_dict({"iterations": 500.0, "log_interval": 100})

    assert settings.iterations == 500
    assert isinstance(settings.iterations, int)
    assert settings.log_interval == 100


def test_boolean_is_rejected_for_float_settings():
    with pytest.raises(ValueError, match="damping"):
        CalibrationSettings.from_dict({"damping": False})
