# travel-agency-cms — Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from src.core.ports.storage import (
    ImageStoragePort,
    StorageDeleteError,
    StorageError,
    StorageWriteError,
)
from src.core.ports.time import TimePort

__all__ = [
    # Storage
    "ImageStoragePort",
    "StorageDeleteError",
    "StorageError",
    "StorageWriteError",
    # Time
    "TimePort",
]
