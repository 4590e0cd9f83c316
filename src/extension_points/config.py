# Copyright 2024-2025 Amiable Development
# SPDX-License-Identifier: Apache-2.0

"""
Execution settings for extension points.

This module provides:
- ExecutionSettings model shared by a registry and its points
- ExecutionSettings.from_env() to read overrides from the environment

Hosts construct the model in code or export environment variables; no
settings file is read.
"""

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "EXTENSION_POINTS_"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ExecutionSettings(BaseModel):
    """Settings that shape how extensions are invoked.

    Attributes:
        offload_sync_callbacks: Run plain (non-async) callbacks in the event
            loop's default executor instead of on the loop thread. Off by
            default, so every extension runs on the single loop thread.
    """

    model_config = ConfigDict(frozen=True)

    offload_sync_callbacks: bool = Field(
        default=False,
        description="Run sync callbacks via loop.run_in_executor",
    )

    @field_validator("offload_sync_callbacks", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        """Accept the usual environment spellings for booleans."""
        if isinstance(v, str):
            value = v.strip().lower()
            if value in TRUE_VALUES:
                return True
            if value in FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean flag: {v!r}")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ExecutionSettings":
        """Build settings from EXTENSION_POINTS_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            ExecutionSettings with defaults for unset variables

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ

        data = {}
        offload = environ.get(f"{ENV_PREFIX}OFFLOAD_SYNC")
        if offload is not None:
            data["offload_sync_callbacks"] = offload

        return cls(**data)
