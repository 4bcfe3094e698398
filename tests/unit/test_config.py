from __future__ import annotations

import pytest

from sortviz.core.config.settings import AppSettings
from sortviz.core.errors import InvalidConfiguration
from sortviz.session.spec import SessionConfig


def test_defaults_come_from_settings() -> None:
    cfg = SessionConfig.from_settings(AppSettings(default_size=12, default_speed_level=9, default_algorithm="radix"))

    assert (cfg.size, cfg.speed_level, cfg.algorithm) == (12, 9, "radix")
    assert cfg.delay_ms == 10


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("SORTVIZ_DEFAULT_SIZE", "50")
    monkeypatch.setenv("SORTVIZ_PACE_SCALE", "0.5")

    s = AppSettings()
    assert s.default_size == 50
    assert s.pace_scale == 0.5


@pytest.mark.parametrize(
    "changes",
    [
        {"size": 4},
        {"size": 201},
        {"speed_level": 0},
        {"speed_level": 11},
        {"algorithm": "bogo"},
    ],
)
def test_out_of_range_changes_are_rejected(changes) -> None:
    with pytest.raises(InvalidConfiguration):
        SessionConfig().updated(**changes)


def test_updated_ignores_unset_fields() -> None:
    cfg = SessionConfig(size=10, speed_level=3, algorithm="merge")

    new = cfg.updated(size=None, speed_level=7, algorithm=None)
    assert (new.size, new.speed_level, new.algorithm) == (10, 7, "merge")
    assert new.delay_ms == 50
    # Original is untouched (frozen model)
    assert cfg.speed_level == 3
