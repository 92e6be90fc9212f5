# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

import os
from dataclasses import dataclass, field


UNSAFE_POLICIES = ("ignore", "log", "raise")


def get_env(var_name: str, default: str) -> str:
    return os.getenv(var_name, default)


def get_bool_env(var_name: str, default: bool) -> bool:
    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ModelConfig:

    UNSAFE_ATTRIBUTE_POLICY: str = field(
        default_factory=lambda: get_env("DYNMODEL_UNSAFE_POLICY", "log")
    )
    """What to do with unsafe assignments: ignore, log or raise."""
    DEBUG: bool = field(default_factory=lambda: get_bool_env("LITESTAR_DEBUG", False))
    """Log unsafe assignments even when the policy is ignore."""

    def __post_init__(self) -> None:
        self.UNSAFE_ATTRIBUTE_POLICY = self.UNSAFE_ATTRIBUTE_POLICY.strip().lower()
        if self.UNSAFE_ATTRIBUTE_POLICY not in UNSAFE_POLICIES:
            raise ValueError(
                f"Invalid unsafe attribute policy '{self.UNSAFE_ATTRIBUTE_POLICY}', "
                f"must be one of: {', '.join(UNSAFE_POLICIES)}"
            )


__config__: ModelConfig | None = None


def get_config() -> ModelConfig:
    """Return the process-wide ModelConfig, creating it on first use.

    Returns:
        The current ModelConfig instance.
    """
    global __config__
    if __config__ is None:
        __config__ = ModelConfig()
    return __config__


def set_config(config: ModelConfig | None) -> None:
    """Replace the process-wide ModelConfig.

    Args:
        config: the new configuration, or None to re-read the environment
            on next use.
    """
    global __config__
    __config__ = config


def reset_config() -> None:
    set_config(None)


# EOF
