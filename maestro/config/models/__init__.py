"""Configuration model exports.

    from maestro.config.models import StorageConfig, SessionsConfig
"""

from maestro.config.models.generation import GenerationConfig
from maestro.config.models.observability import LoggingConfig, ObservabilityConfig
from maestro.config.models.sessions import SessionsConfig
from maestro.config.models.storage import StorageConfig

__all__ = [
    "GenerationConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "SessionsConfig",
    "StorageConfig",
]
