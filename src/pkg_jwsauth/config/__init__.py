from .durations import parse_duration
from .env import settings_from_env
from .settings import JWSAuthSettings

__all__ = ["JWSAuthSettings", "parse_duration", "settings_from_env"]
