"""
Utility module
Logging helpers shared by every layer
"""

from .logger import (
    Logger,
    get_logger,
    set_global_debug,
    enable_file_logging,
)

__all__ = [
    'Logger',
    'get_logger',
    'set_global_debug',
    'enable_file_logging',
]
