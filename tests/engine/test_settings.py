"""Tests for game settings stored in config.json."""

import json

import pytest
from pydantic import ValidationError

from crime_missions.config import get_settings, update_settings
from crime_missions.storage import Storage


@pytest.fixture
def storage(tmp_path):
    return Storage(tmp_path)


def test_defaults_without_config(storage):
    settings = get_settings(storage)
    assert settings.starting_crime_coin == 1000
    assert settings.starting_fun_coin == 10
    assert settings.abort_refund_percent == 25
    assert settings.randomized_progress is False


def test_partial_update_persists(storage):
    update_settings(storage, {"abort_refund_percent": 40})
    update_settings(storage, {"randomized_progress": True})
    settings = get_settings(storage)
    assert settings.abort_refund_percent == 40
    assert settings.randomized_progress is True
    assert settings.starting_crime_coin == 1000


def test_unknown_keys_ignored(storage):
    result = update_settings(storage, {"god_mode": True})
    assert "god_mode" not in result.model_dump()
    (storage.base_path / "config.json").write_text(json.dumps({"god_mode": 1}))
    assert get_settings(storage).abort_refund_percent == 25


def test_out_of_range_refund_rejected(storage):
    with pytest.raises(ValidationError):
        update_settings(storage, {"abort_refund_percent": 150})
    assert get_settings(storage).abort_refund_percent == 25
