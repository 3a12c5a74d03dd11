"""Service configuration read from the environment."""
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ENV_PREFIX = "CALCULATOR_"


class ServiceSettings(BaseModel):
    """
    Runtime settings of the calculator service.

    Every field can be set through a ``CALCULATOR_<FIELD>`` environment
    variable, e.g. ``CALCULATOR_PORT=8080``. Command-line options take
    precedence over the environment.
    """

    model_config = ConfigDict(frozen=True)

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Address the server binds to")
    port: int = Field(default=8000, ge=1, le=65535, description="Server TCP port")
    threaded: bool = Field(default=True, description="Handle each request in its own thread")
    log_level: LogLevel = Field(default="INFO", description="Level of the service logger")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ServiceSettings":
        """
        Build settings from environment variables, then apply overrides.

        Overrides equal to None are ignored so unset CLI options fall back
        to the environment.

        :param environ: Mapping to read from, defaults to ``os.environ``
        :return: Validated settings
        :rtype: ServiceSettings
        :raises pydantic.ValidationError: If a value is invalid
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw.upper() if name == "log_level" else raw
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
