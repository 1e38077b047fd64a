"""Configuration"""

from .config import ConverterConfig
from .loader import invalidate_config_cache, load_config

__all__ = ["ConverterConfig", "load_config", "invalidate_config_cache"]
