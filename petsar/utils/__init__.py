from .geo import distance_between, haversine_m
from .logging_setup import get_logger, init_logger
from .validation import InvalidArgumentError

__all__ = [
    "InvalidArgumentError",
    "distance_between",
    "get_logger",
    "init_logger", # If users might need to re-init with different settings
    "haversine_m",
]
