from .log_config import setup_logging
from .log_cycler import LogCycler

__all__ = ["setup_logging", "LogCycler"]
