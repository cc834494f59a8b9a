"""
Media component - Image upload checks, storage and cleanup.
"""

from .component import remove_refs, store_uploads, validate_upload, validate_uploads
from .models import RemoveRefsOutput, StoreUploadsOutput, UploadedFile, UploadPolicy
from .ports import ImageStoragePort, StorageError

__all__ = [
    # Entry points
    "remove_refs",
    "store_uploads",
    "validate_upload",
    "validate_uploads",
    # Models
    "RemoveRefsOutput",
    "StoreUploadsOutput",
    "UploadedFile",
    "UploadPolicy",
    # Ports
    "ImageStoragePort",
    "StorageError",
]
