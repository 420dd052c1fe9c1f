"""
Core Module - Gateway, configuration, storage and error types.

Components:
- api_config: Backend endpoint configuration (ApiConfig)
- platform_client: RemoteDataGateway protocol and its httpx implementation
- storage: Local key-value store holding the signed-in user's identifiers
- exceptions: GatewayError, FatalInitError, SoftStepError
- log_setup: loguru sink configuration

Design Principle:
Everything that talks to the outside world lives here. The journey,
navigation and home modules depend on the RemoteDataGateway protocol,
never on httpx directly.
"""

from src.core.api_config import ApiConfig
from src.core.exceptions import FatalInitError, GatewayError, JourneyError, SoftStepError
from src.core.log_setup import configure_logging
from src.core.platform_client import PlatformClient, RemoteDataGateway, extract_course_list
from src.core.storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    # Config
    "ApiConfig",
    "configure_logging",
    # Gateway
    "PlatformClient",
    "RemoteDataGateway",
    "extract_course_list",
    # Storage
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
    # Errors
    "JourneyError",
    "GatewayError",
    "FatalInitError",
    "SoftStepError",
]
