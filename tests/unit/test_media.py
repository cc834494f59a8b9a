"""Upload checks, all-or-nothing storing, and concurrent removal."""

import threading
import time

import pytest

from src.components.media import remove_refs, store_uploads, validate_upload
from src.components.media.models import UploadedFile, UploadPolicy
from src.core.errors import STORAGE_ERROR, TIMEOUT
from src.core.ports.storage import StorageDeleteError, StorageWriteError
from tests.factories import jpeg, png

POLICY = UploadPolicy(
    max_bytes=100,
    allowed_extensions=frozenset({".jpg", ".png"}),
    allowed_mime_types=frozenset({"image/jpeg", "image/png"}),
)


class MockStorage:
    """In-memory image store; can fail on the Nth write or on given removals."""

    def __init__(self, fail_on_write: int | None = None, fail_remove: set[str] | None = None):
        self.files: dict[str, bytes] = {}
        self.writes = 0
        self.fail_on_write = fail_on_write
        self.fail_remove = fail_remove or set()
        self.remove_calls: list[str] = []
        self._lock = threading.Lock()

    def store(self, data: bytes, filename: str, folder: str) -> str:
        self.writes += 1
        if self.fail_on_write == self.writes:
            raise StorageWriteError(folder, "disk full")
        ref = f"/uploads/{folder}/{self.writes}-{filename}"
        self.files[ref] = data
        return ref

    def remove(self, ref: str) -> bool:
        with self._lock:
            self.remove_calls.append(ref)
        if ref in self.fail_remove:
            raise StorageDeleteError(ref, "permission denied")
        return self.files.pop(ref, None) is not None

    def exists(self, ref: str) -> bool:
        return ref in self.files


class TestValidateUpload:
    def test_accepts_allowed_image(self) -> None:
        assert validate_upload(jpeg(), POLICY, field="images") == []

    def test_extension_check_is_case_insensitive(self) -> None:
        assert validate_upload(png("LOGO.PNG"), POLICY, field="logo") == []

    def test_rejects_extension(self) -> None:
        upload = UploadedFile("notes.svg", "image/jpeg", b"x")
        codes = [e.code for e in validate_upload(upload, POLICY, field="images")]
        assert codes == ["invalid_extension"]

    def test_rejects_mime_type(self) -> None:
        upload = UploadedFile("photo.jpg", "text/html", b"x")
        errors = validate_upload(upload, POLICY, field="image")

        assert [e.code for e in errors] == ["invalid_mime_type"]
        assert errors[0].field == "image"

    def test_mime_parameters_are_ignored(self) -> None:
        upload = UploadedFile("photo.jpg", "image/jpeg; charset=binary", b"x")
        assert validate_upload(upload, POLICY, field="image") == []

    def test_rejects_empty_file(self) -> None:
        upload = UploadedFile("photo.jpg", "image/jpeg", b"")
        assert [e.code for e in validate_upload(upload, POLICY, field="f")] == ["empty_file"]

    def test_rejects_oversize_file(self) -> None:
        upload = UploadedFile("photo.jpg", "image/jpeg", b"x" * 101)
        assert [e.code for e in validate_upload(upload, POLICY, field="f")] == ["file_too_large"]

    def test_policy_from_rules(self, upload_policy: UploadPolicy) -> None:
        assert ".svg" not in upload_policy.allowed_extensions
        assert "image/webp" in upload_policy.allowed_mime_types


class TestStoreUploads:
    def test_stores_in_order(self) -> None:
        storage = MockStorage()

        result = store_uploads([jpeg("a.jpg"), jpeg("b.jpg")], "packages", storage=storage)

        assert result.success
        assert result.refs == ["/uploads/packages/1-a.jpg", "/uploads/packages/2-b.jpg"]

    def test_failure_removes_files_already_written(self) -> None:
        storage = MockStorage(fail_on_write=3)

        result = store_uploads(
            [jpeg("a.jpg"), jpeg("b.jpg"), jpeg("c.jpg")], "packages", storage=storage
        )

        assert not result.success
        assert result.refs == []
        assert [e.code for e in result.errors] == [STORAGE_ERROR]
        assert storage.files == {}

    def test_slow_write_times_out_and_is_cleaned_up(self) -> None:
        release = threading.Event()

        class SlowSecondWrite(MockStorage):
            def store(self, data: bytes, filename: str, folder: str) -> str:
                if self.writes >= 1:
                    release.wait(5)
                return super().store(data, filename, folder)

        storage = SlowSecondWrite()
        started = time.monotonic()
        try:
            result = store_uploads(
                [jpeg("a.jpg"), jpeg("b.jpg")], "packages", storage=storage, timeout_seconds=0.1
            )
            elapsed = time.monotonic() - started
        finally:
            release.set()

        assert elapsed < 1.0
        assert not result.success
        assert result.refs == []
        assert [e.code for e in result.errors] == [TIMEOUT]

        # the late write lands after the caller gave up and is removed again
        for _ in range(200):
            if "/uploads/packages/2-b.jpg" in storage.remove_calls and not storage.files:
                break
            time.sleep(0.01)
        assert "/uploads/packages/2-b.jpg" in storage.remove_calls
        assert storage.files == {}

    def test_nothing_to_store(self) -> None:
        result = store_uploads([], "logos", storage=MockStorage())
        assert result.success
        assert result.refs == []


class TestRemoveRefs:
    def test_removes_every_reference_once(self) -> None:
        storage = MockStorage()
        refs = store_uploads([jpeg("a.jpg"), jpeg("b.jpg")], "packages", storage=storage).refs

        result = remove_refs([*refs, refs[0], ""], storage=storage)

        assert result.success
        assert sorted(result.removed) == sorted(refs)
        assert sorted(storage.remove_calls) == sorted(refs)
        assert storage.files == {}

    def test_missing_file_is_not_a_failure(self) -> None:
        result = remove_refs(["/uploads/packages/gone.jpg"], storage=MockStorage())

        assert result.success
        assert result.removed == []

    def test_failure_is_reported_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        storage = MockStorage(fail_remove={"/uploads/packages/1-a.jpg"})
        refs = store_uploads([jpeg("a.jpg"), jpeg("b.jpg")], "packages", storage=storage).refs

        result = remove_refs(refs, storage=storage)

        assert not result.success
        assert result.failed == ["/uploads/packages/1-a.jpg"]
        assert result.removed == ["/uploads/packages/2-b.jpg"]
        assert "Removing '/uploads/packages/1-a.jpg' failed" in caplog.text

    def test_timeout_reports_pending_refs(self) -> None:
        release = threading.Event()

        class SlowStorage(MockStorage):
            def remove(self, ref: str) -> bool:
                release.wait(5)
                return True

        try:
            result = remove_refs(["/uploads/x/1.jpg"], storage=SlowStorage(), timeout_seconds=0.05)
        finally:
            release.set()

        assert result.timed_out
        assert result.failed == ["/uploads/x/1.jpg"]
        assert not result.success
