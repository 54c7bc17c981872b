"""
Engine Configuration.

Settings an engine starts with. The logging toggles on a running
engine change its runtime flags, not the config it was created with.
"""

from __future__ import annotations
import os

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class EngineConfig(BaseModel):
    """Startup settings for a Staction engine."""
    logging_enabled: bool = Field(True, description="Emit a log line per dispatched action")
    log_state: bool = Field(False, description="Include the pre-dispatch state in that line")
    name: str | None = Field(None, description="Label used by the debugging registry")

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, prefix: str = "STACTION_") -> EngineConfig:
        """
        Build a config from environment variables.

        Reads {prefix}LOGGING, {prefix}LOG_STATE and {prefix}NAME.
        Unset variables keep their defaults.
        """
        values: dict[str, object] = {}

        logging_flag = os.environ.get(f"{prefix}LOGGING")
        if logging_flag is not None:
            values["logging_enabled"] = logging_flag.strip().lower() in _TRUTHY

        state_flag = os.environ.get(f"{prefix}LOG_STATE")
        if state_flag is not None:
            values["log_state"] = state_flag.strip().lower() in _TRUTHY

        name = os.environ.get(f"{prefix}NAME")
        if name:
            values["name"] = name

        return cls(**values)
