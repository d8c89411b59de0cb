from .loader import load_batch
from .types import BatchConfig, ConfigError, UnsupportedConfigFormatError

__all__ = ["load_batch", "BatchConfig", "ConfigError", "UnsupportedConfigFormatError"]
