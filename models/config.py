"""Simulator configuration model."""

import os
from typing import Literal, Optional

from pydantic import BaseModel, Field


DEFAULT_MAX_LOG_SIZE = 1000


class SimulatorConfig(BaseModel):
    """Configuration for an EventSimulator.

    Args:
        mode: "mock" runs the simulator, "disabled" means no simulator is created.
        auto_reconnect: Reserved for callers; the simulator never reconnects itself.
        reconnect_delay: Reconnect delay in milliseconds, reserved for callers.
        max_log_size: Maximum number of events kept in the event log.
        connect_delay: Simulated settling delay of connect() in milliseconds.
    """

    mode: Literal["mock", "disabled"] = "mock"
    auto_reconnect: bool = False
    reconnect_delay: int = Field(default=5000, ge=0)
    max_log_size: int = Field(default=DEFAULT_MAX_LOG_SIZE, gt=0)
    connect_delay: int = Field(default=50, gt=0)

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "SimulatorConfig":
        """Build a config from CTI_* environment variables.

        Unset variables fall back to the model defaults. Values are validated
        by the model, so malformed numbers raise a pydantic ValidationError.

        Args:
            environ: Mapping to read from (defaults to os.environ).

        Returns:
            The resulting SimulatorConfig.
        """
        environ = os.environ if environ is None else environ
        env_fields = {
            "mode": "CTI_MODE",
            "auto_reconnect": "CTI_AUTO_RECONNECT",
            "reconnect_delay": "CTI_RECONNECT_DELAY",
            "max_log_size": "CTI_MAX_LOG_SIZE",
            "connect_delay": "CTI_CONNECT_DELAY",
        }
        values = {
            field: environ[var].strip()
            for field, var in env_fields.items()
            if environ.get(var, "").strip()
        }
        return cls(**values)
