"""
Engine configuration.

Settings come from environment variables; a .env file in the working
directory is loaded first (python-dotenv), same as the service bootstrap.

    SCHEMA_ENGINE_LOG_LEVEL              INFO
    SCHEMA_ENGINE_DEFAULT_SCHEMA_TYPE    default
    SCHEMA_ENGINE_DEPRECATION_WARNINGS   true
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from schema_engine.schemas import SchemaType

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EngineSettings:
    log_level: str = "INFO"
    default_schema_type: str = SchemaType.DEFAULT.value
    deprecation_warnings: bool = True

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "EngineSettings":
        """Build settings from the environment (and .env, unless disabled)."""
        if load_env_file:
            load_dotenv()

        return cls(
            log_level=os.getenv("SCHEMA_ENGINE_LOG_LEVEL", "INFO").upper(),
            default_schema_type=os.getenv("SCHEMA_ENGINE_DEFAULT_SCHEMA_TYPE", SchemaType.DEFAULT.value),
            deprecation_warnings=os.getenv("SCHEMA_ENGINE_DEPRECATION_WARNINGS", "true").lower() in _TRUTHY,
        )


def configure_logging(settings: EngineSettings) -> None:
    """Configure root logging. Call once from the host application's startup."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )
