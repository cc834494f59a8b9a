"""
Site settings: defaults, validation, and logo replacement.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.fs.filestore import FileSystemImageStore
from src.components.media.models import UploadedFile, UploadPolicy
from src.components.settings import (
    PUBLIC_FIELDS,
    GetSettingsInput,
    UpdateSettingsInput,
    get_default_settings,
    public_config,
    run_get,
    run_update,
)
from src.domain.entities import SiteSettings
from tests.factories import png


class MockSettingsRepo:
    """Mock settings repository for testing."""

    def __init__(self, initial: SiteSettings | None = None, fail: bool = False) -> None:
        self._settings = initial
        self.fail = fail
        self.save_count = 0

    def get(self) -> SiteSettings | None:
        return self._settings

    def save(self, settings: SiteSettings) -> SiteSettings:
        if self.fail:
            raise RuntimeError("database is locked")
        self._settings = settings
        self.save_count += 1
        return settings


@pytest.fixture
def store(tmp_path: Path) -> FileSystemImageStore:
    return FileSystemImageStore(str(tmp_path / "public"))


def _update(
    repo: MockSettingsRepo,
    store: FileSystemImageStore,
    clock: FixedClock,
    policy: UploadPolicy,
    inp: UpdateSettingsInput,
):
    return run_update(inp, repo=repo, storage=store, time=clock, upload_policy=policy)


class TestDefaults:
    def test_get_returns_defaults_when_db_empty(self) -> None:
        result = run_get(GetSettingsInput(), repo=MockSettingsRepo())

        assert result.settings.name == "Travel Agency"
        assert result.settings.status is True
        assert result.settings.logo is None

    def test_get_returns_stored_row(self) -> None:
        stored = SiteSettings(name="Sunny Trips", description="Since 1999")
        result = run_get(GetSettingsInput(), repo=MockSettingsRepo(stored))
        assert result.settings.name == "Sunny Trips"

    def test_public_config_hides_smtp(self) -> None:
        settings = get_default_settings().model_copy(
            update={"smtp_host": "mail.example.com", "smtp_pass": "s3cret"}
        )

        config = public_config(settings)

        assert set(config) == set(PUBLIC_FIELDS)
        assert "s3cret" not in config.values()


class TestUpdate:
    def test_update_fields(
        self, store: FileSystemImageStore, clock: FixedClock, upload_policy: UploadPolicy
    ) -> None:
        repo = MockSettingsRepo()

        result = _update(
            repo,
            store,
            clock,
            upload_policy,
            UpdateSettingsInput(
                updates={
                    "name": "Sunny Trips",
                    "smtp_port": "587",
                    "facebook_url": "https://facebook.com/sunny",
                    "status": False,
                }
            ),
        )

        assert result.success
        assert result.settings.name == "Sunny Trips"
        assert result.settings.smtp_port == 587
        assert result.settings.status is False
        assert result.settings.updated_at == clock.now_utc()
        assert repo.save_count == 1

    def test_blank_optional_field_clears_it(
        self, store: FileSystemImageStore, clock: FixedClock, upload_policy: UploadPolicy
    ) -> None:
        repo = MockSettingsRepo(
            SiteSettings(name="S", description="", instagram_url="https://instagram.com/s")
        )

        result = _update(
            repo, store, clock, upload_policy, UpdateSettingsInput(updates={"instagram_url": " "})
        )

        assert result.success
        assert result.settings.instagram_url is None

    def test_unknown_keys_are_ignored(
        self, store: FileSystemImageStore, clock: FixedClock, upload_policy: UploadPolicy
    ) -> None:
        result = _update(
            MockSettingsRepo(),
            store,
            clock,
            upload_policy,
            UpdateSettingsInput(updates={"id": "other", "logo": "/etc/passwd"}),
        )

        assert result.success
        assert result.settings.id == "default"
        assert result.settings.logo is None

    @pytest.mark.parametrize(
        ("updates", "field", "code"),
        [
            ({"name": ""}, "name", "required"),
            ({"name": "x" * 101}, "name", "max_length"),
            ({"youtube_url": "javascript:alert(1)"}, "youtube_url", "invalid_url"),
            ({"smtp_from": "not-an-email"}, "smtp_from", "invalid_email"),
        ],
    )
    def test_validation_errors(
        self,
        store: FileSystemImageStore,
        clock: FixedClock,
        upload_policy: UploadPolicy,
        updates: dict[str, str],
        field: str,
        code: str,
    ) -> None:
        repo = MockSettingsRepo()

        result = _update(repo, store, clock, upload_policy, UpdateSettingsInput(updates=updates))

        assert not result.success
        assert (field, code) in [(e.field, e.code) for e in result.errors]
        assert repo.save_count == 0

    def test_non_numeric_port_is_rejected(
        self, store: FileSystemImageStore, clock: FixedClock, upload_policy: UploadPolicy
    ) -> None:
        result = _update(
            MockSettingsRepo(),
            store,
            clock,
            upload_policy,
            UpdateSettingsInput(updates={"smtp_port": "twenty-five"}),
        )

        assert not result.success
        assert result.errors[0].field == "smtp_port"


class TestLogo:
    def test_new_logo_replaces_old_file(
        self, store: FileSystemImageStore, clock: FixedClock, upload_policy: UploadPolicy
    ) -> None:
        old_ref = store.store(b"old", "old.png", "logos")
        repo = MockSettingsRepo(SiteSettings(name="S", description="", logo=old_ref))

        result = _update(
            repo, store, clock, upload_policy, UpdateSettingsInput(updates={}, logo=png("new.png"))
        )

        assert result.success
        assert result.settings.logo is not None
        assert result.settings.logo.startswith("/uploads/logos/")
        assert store.exists(result.settings.logo)
        assert not store.exists(old_ref)

    def test_remove_logo(
        self, store: FileSystemImageStore, clock: FixedClock, upload_policy: UploadPolicy
    ) -> None:
        old_ref = store.store(b"old", "old.png", "logos")
        repo = MockSettingsRepo(SiteSettings(name="S", description="", logo=old_ref))

        result = _update(
            repo, store, clock, upload_policy, UpdateSettingsInput(updates={}, remove_logo=True)
        )

        assert result.success
        assert result.settings.logo is None
        assert not store.exists(old_ref)

    def test_logo_kept_when_untouched(
        self, store: FileSystemImageStore, clock: FixedClock, upload_policy: UploadPolicy
    ) -> None:
        old_ref = store.store(b"old", "old.png", "logos")
        repo = MockSettingsRepo(SiteSettings(name="S", description="", logo=old_ref))

        result = _update(
            repo, store, clock, upload_policy, UpdateSettingsInput(updates={"name": "T"})
        )

        assert result.settings.logo == old_ref
        assert store.exists(old_ref)

    def test_failed_save_discards_new_logo_and_keeps_old(
        self,
        store: FileSystemImageStore,
        clock: FixedClock,
        upload_policy: UploadPolicy,
        tmp_path: Path,
    ) -> None:
        old_ref = store.store(b"old", "old.png", "logos")
        repo = MockSettingsRepo(SiteSettings(name="S", description="", logo=old_ref), fail=True)

        result = _update(
            repo, store, clock, upload_policy, UpdateSettingsInput(updates={}, logo=png("new.png"))
        )

        assert not result.success
        assert [e.code for e in result.errors] == ["store_error"]
        assert store.exists(old_ref)
        remaining = list((tmp_path / "public" / "uploads" / "logos").iterdir())
        assert [p.name for p in remaining] == [old_ref.rsplit("/", 1)[1]]

    def test_invalid_logo_is_rejected_before_storing(
        self,
        store: FileSystemImageStore,
        clock: FixedClock,
        upload_policy: UploadPolicy,
        tmp_path: Path,
    ) -> None:
        bad = UploadedFile("logo.svg", "image/svg+xml", b"<svg/>")

        result = _update(
            MockSettingsRepo(), store, clock, upload_policy, UpdateSettingsInput(updates={}, logo=bad)
        )

        assert not result.success
        assert {e.field for e in result.errors} == {"logo"}
        assert not (tmp_path / "public" / "uploads" / "logos").exists()
