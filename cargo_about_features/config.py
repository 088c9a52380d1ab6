"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_OUTPUT = "Cargo.features"

_ENV_CARGO = "CARGO"
_ENV_LOG_LEVEL = "CARGO_ABOUT_FEATURES_LOG_LEVEL"
_ENV_LOG_FORMAT = "CARGO_ABOUT_FEATURES_LOG_FORMAT"
_ENV_OUTPUT = "CARGO_ABOUT_FEATURES_OUTPUT"


@dataclass(frozen=True)
class Settings:
    cargo: str = "cargo"
    log_level: str = "WARNING"
    log_format: str = "console"  # "console" | "json"
    output: str = DEFAULT_OUTPUT

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables.

        ``CARGO`` is set by cargo itself when it dispatches to a
        ``cargo-<name>`` subcommand, so the same toolchain is reused.
        """
        return cls(
            cargo=os.environ.get(_ENV_CARGO) or "cargo",
            log_level=os.environ.get(_ENV_LOG_LEVEL, "WARNING").upper(),
            log_format=os.environ.get(_ENV_LOG_FORMAT, "console").lower(),
            output=os.environ.get(_ENV_OUTPUT) or DEFAULT_OUTPUT,
        )
