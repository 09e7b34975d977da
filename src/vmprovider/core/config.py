# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Provider settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vmprovider.contract import AUTHORITY

__all__ = ["ProviderSettings", "ENV_PREFIX", "FEATURES_VAR", "parse_features"]

ENV_PREFIX = "VMP_"
FEATURES_VAR = ENV_PREFIX + "FEATURES"

# Boolean settings that may also be switched through FEATURES_VAR.
_FEATURE_FIELDS = frozenset({"serialized_writes"})

JournalMode = Literal["WAL", "DELETE", "TRUNCATE", "PERSIST", "MEMORY", "OFF"]


def parse_features(raw: str) -> dict[str, str]:
    """Split a ``VMP_FEATURES`` value into ``{name: value}``.

    ``"serialized-writes=off, !other, third"`` gives
    ``{"serialized_writes": "off", "other": "false", "third": "true"}``.
    Values are left as text for the settings model to coerce.
    """

    features: dict[str, str] = {}
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        name, sep, value = token.partition("=")
        if not sep and name[0] in "!-":
            name, value = name[1:], "false"
        elif not sep:
            value = "true"
        features[name.strip().lower().replace("-", "_")] = value.strip()
    return features


class ProviderSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_path: str = ":memory:"
    journal_mode: JournalMode = "WAL"
    busy_timeout_ms: int = Field(default=10000, ge=0)
    authority: str = AUTHORITY
    serialized_writes: bool = True
    log_dir: Path | None = None

    @field_validator("journal_mode", mode="before")
    def _upper_journal_mode(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("authority")
    def _authority_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value:
            raise ValueError("authority must be a non-empty host name")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ProviderSettings:
        """Build settings from ``VMP_*`` variables and ``VMP_FEATURES`` flags."""

        env = os.environ if environ is None else environ
        fields = {
            "database_path": "DATABASE_PATH",
            "journal_mode": "JOURNAL_MODE",
            "busy_timeout_ms": "BUSY_TIMEOUT_MS",
            "authority": "AUTHORITY",
            "log_dir": "LOG_DIR",
        }
        values: dict[str, object] = {
            name: env[ENV_PREFIX + key] for name, key in fields.items() if ENV_PREFIX + key in env
        }
        features = parse_features(env.get(FEATURES_VAR, ""))
        values.update(
            (name, value) for name, value in features.items() if name in _FEATURE_FIELDS
        )
        return cls(**values)
