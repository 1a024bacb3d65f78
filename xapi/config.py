"""
Statement Configuration

Environment-based defaults for building statements.

Environment Variables:
    XAPI_PRESERVE_IDS: Keep an existing "id" when rebuilding a statement
        from another one (default false: a fresh id is always assigned)
    XAPI_ID_STRATEGY: Identifier strategy
        - "uuid4" (default, random)
        - "uuid1" (time-based)
    XAPI_DISPLAY_LANGUAGE: Language tag used for display strings
        (default en-US)
"""

import os
from dataclasses import dataclass
from typing import Optional

from .core.errors import ConfigurationError
from .core.ids import IdStrategy

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_id_strategy(name: str) -> IdStrategy:
    explicit = os.getenv(name, "").strip().lower()
    if not explicit:
        return IdStrategy.UUID4
    try:
        return IdStrategy(explicit)
    except ValueError:
        raise ConfigurationError(
            f"Unknown {name}: {explicit}. "
            f"Valid values: {', '.join(s.value for s in IdStrategy)}"
        ) from None


@dataclass
class StatementConfig:
    """Defaults applied when statements are built."""
    preserve_ids: bool = False
    id_strategy: IdStrategy = IdStrategy.UUID4
    display_language: str = "en-US"

    @classmethod
    def from_env(cls) -> "StatementConfig":
        """
        Load configuration from environment variables.

        Raises:
            ConfigurationError: If XAPI_ID_STRATEGY is not a known strategy
        """
        return cls(
            preserve_ids=_env_flag("XAPI_PRESERVE_IDS"),
            id_strategy=_env_id_strategy("XAPI_ID_STRATEGY"),
            display_language=os.getenv("XAPI_DISPLAY_LANGUAGE", "en-US"),
        )


_config: Optional[StatementConfig] = None


def get_config() -> StatementConfig:
    """Get the process-wide configuration, loading it from the environment once."""
    global _config
    if _config is None:
        _config = StatementConfig.from_env()
    return _config


def set_config(config: StatementConfig) -> None:
    """Replace the process-wide configuration."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the loaded configuration; the next get_config() re-reads the environment."""
    global _config
    _config = None
