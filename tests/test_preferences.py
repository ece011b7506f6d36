"""Tests for persisted preferences."""

import json

import pytest

from preferences import Preferences


@pytest.fixture
def preferences(tmp_path):
    return Preferences(tmp_path / "preferences.json")


def test_defaults_without_file(preferences):
    assert preferences.as_dict() == {"auto_copy": False, "auto_generate": False}
    assert preferences.get("auto_copy") is False


def test_set_persists_to_file(preferences):
    preferences.set("auto_copy", True)

    assert preferences.get("auto_copy") is True
    assert preferences.get("auto_generate") is False
    assert json.loads(preferences.path.read_text()) == {"auto_copy": True, "auto_generate": False}

    reloaded = Preferences(preferences.path)
    assert reloaded.get("auto_copy") is True


def test_unknown_preference_raises(preferences):
    with pytest.raises(KeyError):
        preferences.get("dark_mode")
    with pytest.raises(KeyError):
        preferences.set("dark_mode", True)


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_unreadable_file_falls_back_to_defaults(preferences, content):
    preferences.path.write_text(content)
    assert preferences.as_dict() == {"auto_copy": False, "auto_generate": False}
