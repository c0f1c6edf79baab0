from . import connect_to_services, logging

__all__ = [
    "connect_to_services",
    "logging",
]
