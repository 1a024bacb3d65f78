# Core services: identifiers, path initialization, serialization
from .errors import XAPIError, SerializationError, ConfigurationError
from .ids import IdGenerator, IdStrategy, generate_id, generate_time_id, get_id_generator
from .paths import ensure_path, get_or_create, set_value
from .serializer import Serializer

__all__ = [
    "XAPIError",
    "SerializationError",
    "ConfigurationError",
    "IdGenerator",
    "IdStrategy",
    "generate_id",
    "generate_time_id",
    "get_id_generator",
    "ensure_path",
    "get_or_create",
    "set_value",
    "Serializer",
]
