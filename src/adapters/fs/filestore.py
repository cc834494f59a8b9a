import logging
import os
import re
from pathlib import Path, PurePosixPath
from uuid import uuid4

from src.core.ports.storage import StorageDeleteError, StorageWriteError

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads/"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    """Reduce a client filename to a harmless basename, keeping its extension."""
    # Clients may send "C:\\photos\\beach.jpg" or "../../x.jpg"
    name = PurePosixPath(filename.replace("\\", "/")).name
    stem, suffix = os.path.splitext(name)
    safe_stem = _UNSAFE_CHARS.sub("-", stem).strip("-.")
    safe_suffix = _UNSAFE_CHARS.sub("", suffix).lower()
    if safe_suffix == ".":
        safe_suffix = ""
    return f"{safe_stem or 'upload'}{safe_suffix}"


class FileSystemImageStore:
    """
    Stores uploads under <public_root>/uploads/<folder>/.

    References are the web path relative to the public root, so the static
    mount at /uploads serves them as-is.
    """

    def __init__(self, public_root: str):
        self.public_root = Path(public_root).resolve()
        self.uploads_root = self.public_root / "uploads"
        if not self.uploads_root.exists():
            os.makedirs(self.uploads_root, exist_ok=True)

    def _resolve_ref(self, ref: str) -> Path | None:
        """Map a reference to a path inside the uploads root, or None."""
        if not ref or not ref.startswith(UPLOADS_PREFIX):
            return None
        target = (self.public_root / ref.lstrip("/")).resolve()
        # Prevent traversal
        if not target.is_relative_to(self.uploads_root):
            logger.warning("Refusing to touch path outside uploads root: %s", ref)
            return None
        return target

    def store(self, data: bytes, filename: str, folder: str) -> str:
        folder_name = safe_filename(folder)
        unique_name = f"{uuid4()}-{safe_filename(filename)}"
        directory = self.uploads_root / folder_name
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with open(directory / unique_name, "wb") as f:
                f.write(data)
        except OSError as e:
            raise StorageWriteError(folder_name, str(e)) from e

        return f"{UPLOADS_PREFIX}{folder_name}/{unique_name}"

    def remove(self, ref: str) -> bool:
        target = self._resolve_ref(ref)
        if target is None:
            return False
        try:
            os.remove(target)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageDeleteError(ref, str(e)) from e
        return True

    def exists(self, ref: str) -> bool:
        target = self._resolve_ref(ref)
        return target is not None and target.is_file()
