"""Utility modules for keen."""

from keen.utils.logging import get_logger, set_verbosity, LogLevel, log_event, log_operator
from keen.utils.randoms import indices, next_double, sample_indices, subsets

__all__ = [
    "get_logger",
    "set_verbosity",
    "LogLevel",
    "log_event",
    "log_operator",
    "indices",
    "next_double",
    "sample_indices",
    "subsets",
]
