"""
Image storage port.

Protocol-based interface for the upload store. References returned by
`store` are paths relative to the public web root (e.g.
"/uploads/packages/<uuid>-beach.jpg") and are what the database keeps.

Invariants:
- A reference is never reused: every stored file gets a fresh unique name
- `remove` only ever touches files inside the managed uploads root
"""

from __future__ import annotations

from typing import Protocol


class ImageStoragePort(Protocol):
    """Image storage port interface."""

    def store(self, data: bytes, filename: str, folder: str) -> str:
        """
        Persist bytes under a generated unique name inside `folder`.

        Args:
            data: File bytes
            filename: Original client filename (used as a readable suffix)
            folder: Namespace folder ("packages", "articles", "logos")

        Returns:
            Reference path relative to the public root

        Raises:
            StorageError: If the write fails
        """
        ...

    def remove(self, ref: str) -> bool:
        """
        Delete the file behind a reference.

        Empty references, references outside the managed root and missing
        files are a no-op.

        Returns:
            True if a file was deleted, False otherwise

        Raises:
            StorageError: If the file exists but could not be deleted
        """
        ...

    def exists(self, ref: str) -> bool:
        """Check if a managed reference points at an existing file."""
        ...


class StorageError(Exception):
    """Base class for storage errors."""


class StorageWriteError(StorageError):
    """Raised when an upload cannot be written."""

    def __init__(self, folder: str, reason: str) -> None:
        self.folder = folder
        super().__init__(f"Could not store file in '{folder}': {reason}")


class StorageDeleteError(StorageError):
    """Raised when an existing file cannot be removed."""

    def __init__(self, ref: str, reason: str) -> None:
        self.ref = ref
        super().__init__(f"Could not remove '{ref}': {reason}")
