from __future__ import annotations

import pytest

from gtodrill.core.config import SPOT_TYPES, TrainerConfig


def test_defaults_cover_every_spot_type() -> None:
    config = TrainerConfig()
    assert config.spot_types == SPOT_TYPES
    assert config.walk_steps == 20
    assert config.any_walk_steps == 50


def test_from_env_parses_prefixed_values() -> None:
    config = TrainerConfig.from_env(
        {
            "GTODRILL_SPOT_TYPES": "RFI, vs Open",
            "GTODRILL_MAX_ATTEMPTS": "8",
            "GTODRILL_STARTING_LIVES": "2.5",
            "GTODRILL_SEED": "",
            "UNRELATED": "1",
        }
    )

    assert config.spot_types == ("RFI", "vs Open")
    assert config.max_attempts == 8
    assert config.starting_lives == 2.5
    assert config.seed is None


def test_from_env_rejects_bad_values() -> None:
    with pytest.raises(ValueError, match="GTODRILL_MAX_ATTEMPTS"):
        TrainerConfig.from_env({"GTODRILL_MAX_ATTEMPTS": "many"})
    with pytest.raises(ValueError, match="unknown spot types"):
        TrainerConfig.from_env({"GTODRILL_SPOT_TYPES": "RFI,Limp"})


def test_with_overrides_skips_none() -> None:
    config = TrainerConfig(max_attempts=3).with_overrides(max_attempts=None, seed=11)
    assert config.max_attempts == 3
    assert config.seed == 11


def test_from_env_parses_bounty_display_flag() -> None:
    assert TrainerConfig.from_env({"GTODRILL_BOUNTY_IN_DOLLARS": "yes"}).bounty_in_dollars is True
    assert TrainerConfig.from_env({"GTODRILL_BOUNTY_IN_DOLLARS": "0"}).bounty_in_dollars is False
    assert TrainerConfig.from_env({}).bounty_in_dollars is False
