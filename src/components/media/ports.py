"""
Media component port definitions.
"""

from src.core.ports.storage import ImageStoragePort, StorageError

__all__ = ["ImageStoragePort", "StorageError"]
