# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LazySlotSettings(BaseSettings, frozen=True):
    """Library settings with environment variable support.

    Every field can be set through a ``LAZYSLOT_``-prefixed environment
    variable or one of the dotenv files listed in ``model_config``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LAZYSLOT_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    LOG_LEVEL: str = Field(
        default="WARNING",
        description="Level of the ``lazyslot`` package logger",
    )

    ALLOW_REDECLARE: bool = Field(
        default=False,
        description=(
            "Let a second declaration of the same name on the same type "
            "replace the first instead of raising DuplicateDeclarationError"
        ),
    )

    # Class variable to store the singleton instance
    _instance: ClassVar[Any] = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{value}'")
        return level


# Create a singleton instance
settings = LazySlotSettings()
# Store the instance in the class variable for singleton pattern
LazySlotSettings._instance = settings
