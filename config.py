# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Centralized engine configuration.

All tunable constants of the match engine live in ``EngineConfig``. The
defaults reproduce the reference balance; a JSON file named by the
``DIAMOND_ENGINE_CONFIG`` environment variable (or passed explicitly) can
override any subset of them.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

ENGINE_CONFIG_ENV = "DIAMOND_ENGINE_CONFIG"


class ConfigError(Exception):
    """Raised when an engine configuration file cannot be loaded."""

    def __init__(self, message: str, path: str | None = None,
                 details: list[str] | None = None):
        self.path = path
        self.details = details or []
        super().__init__(message)


# ---------------------------------------------------------------------------
# Config sections
# ---------------------------------------------------------------------------

class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class AtBatConfig(_Section):
    """Constants of the per-at-bat probability pipeline."""
    strikeout_divisor: float = Field(default=1.8, gt=0)
    strikeout_control_weight: float = 0.4
    walk_wildness_divisor: float = Field(default=12.0, gt=0)
    walk_discipline_divisor: float = Field(default=20.0, gt=0)
    walk_discipline_threshold: float = 40.0
    batter_score_multiplier: float = 1.2
    pitcher_score_multiplier: float = 0.9
    defense_score_multiplier: float = 0.8
    power_hit_bonus_weight: float = 0.15
    max_net_score: float = 15.0
    min_net_score: float = -15.0
    homerun_threshold: float = 98.0
    triple_threshold: float = 95.0
    double_threshold: float = 85.0
    single_threshold: float = 55.0
    groundout_share: float = Field(default=0.45, ge=0, le=1)
    flyout_share: float = Field(default=0.35, ge=0, le=1)
    lineout_share: float = Field(default=0.12, ge=0, le=1)
    default_glove: float = 50.0


class BaserunningConfig(_Section):
    """Extra-base attempt chances, in percent."""
    base_attempt_chance: float = 15.0
    speed_attempt_scale: float = 0.5
    base_success_chance: float = 55.0
    speed_success_scale: float = 0.6
    min_attempt_chance: float = 5.0
    max_attempt_chance: float = 55.0
    min_success_chance: float = 25.0
    max_success_chance: float = 90.0
    two_out_attempt_bonus: float = 15.0
    default_runner_speed: float = 40.0


class FatigueConfig(_Section):
    effectiveness_loss_per_inning: float = Field(default=0.08, ge=0)
    min_effectiveness: float = Field(default=0.55, ge=0, le=1)
    tired_innings: int = 4
    gassed_innings: int = 6
    tired_extra: float = 0.5
    gassed_extra: float = 1.5


class RotationConfig(_Section):
    first_reliever_inning: int = Field(default=5, ge=1)
    second_reliever_inning: int = Field(default=7, ge=1)


class RewardConfig(_Section):
    base_win: int = Field(default=500, ge=0)
    base_loss: int = Field(default=250, ge=0)


class SpiritConfig(_Section):
    """Spirit momentum deltas and end-of-match regeneration."""
    single: int = 4
    double: int = 6
    triple: int = 8
    homerun: int = 10
    rbi_bonus: int = 3
    walk: int = 2
    strikeout: int = -3
    team_run_scored: int = 2
    pitch_strikeout: int = 5
    pitch_out: int = 2
    hit_allowed: int = -2
    walk_allowed: int = -3
    run_allowed: int = -5
    homerun_allowed: int = -8
    regen_per_match: int = Field(default=20, ge=0)


class RulesConfig(_Section):
    regulation_innings: int = Field(default=9, ge=1)
    max_innings: int = Field(default=18, ge=1)
    lineup_size: int = Field(default=9, ge=1)
    adaptation_penalty_scale: tuple[float, ...] = (1.0, 1.0, 1.0, 1.0, 1.0)

    @field_validator("adaptation_penalty_scale")
    @classmethod
    def _scale_not_empty(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        if not v:
            raise ValueError("adaptation_penalty_scale must have at least one entry")
        return v


class EngineConfig(_Section):
    """Complete configuration of the match engine."""
    at_bat: AtBatConfig = Field(default_factory=AtBatConfig)
    baserunning: BaserunningConfig = Field(default_factory=BaserunningConfig)
    fatigue: FatigueConfig = Field(default_factory=FatigueConfig)
    rotation: RotationConfig = Field(default_factory=RotationConfig)
    rewards: RewardConfig = Field(default_factory=RewardConfig)
    spirit: SpiritConfig = Field(default_factory=SpiritConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)


DEFAULT_CONFIG = EngineConfig()


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def get_config_path() -> str:
    """Return the config path from the environment, or empty string if not set."""
    return os.environ.get(ENGINE_CONFIG_ENV, "")


def load_engine_config(path: Path | str | None = None) -> EngineConfig:
    """Load an EngineConfig from a JSON file.

    Falls back to ``$DIAMOND_ENGINE_CONFIG`` and then to the defaults.
    """
    if path is None:
        path = get_config_path() or None
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    try:
        raw = json.loads(path.read_text())
    except OSError as exc:
        raise ConfigError(f"Cannot read engine config: {exc}", path=str(path)) from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Engine config is not valid JSON: {exc}", path=str(path)) from exc

    try:
        config = EngineConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(
            f"Engine config failed validation with {exc.error_count()} error(s)",
            path=str(path),
            details=[f"{e.get('loc', '?')}: {e.get('msg', '?')}" for e in exc.errors()],
        ) from exc

    logger.info("Loaded engine config from %s", path)
    return config
