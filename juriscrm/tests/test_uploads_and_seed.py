"""
Tests for minutes storage, demo seed and settings
"""

import pytest
from datetime import datetime, timedelta
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from juriscrm.config import Settings
from juriscrm.seed import DEMO_JURISDICTIONS, DEMO_PROFESSIONALS, seed_demo_data
from juriscrm.store import MemoryStorage
from juriscrm.uploads import LocalMinutesStorage, UploadTooLargeError


class TestLocalMinutesStorage:
    """Test the local minutes store"""

    def test_generated_key_keeps_extension(self, tmp_path):
        files = LocalMinutesStorage(str(tmp_path), 100)
        key = files.generate_key("Ata Audiência.PDF")
        assert key.startswith("minutes-")
        assert key.endswith(".pdf")

    def test_key_without_filename(self, tmp_path):
        files = LocalMinutesStorage(str(tmp_path), 100)
        assert "." not in files.generate_key(None)

    def test_put_writes_file_and_returns_url(self, tmp_path):
        files = LocalMinutesStorage(str(tmp_path / "nested"), 100)
        ref = files.put("minutes-1.pdf", b"abc")
        assert ref == "/uploads/minutes-1.pdf"
        assert (tmp_path / "nested" / "minutes-1.pdf").read_bytes() == b"abc"

    def test_put_rejects_large_file(self, tmp_path):
        files = LocalMinutesStorage(str(tmp_path), 2)
        with pytest.raises(UploadTooLargeError):
            files.put("minutes-2.pdf", b"abc")
        assert not (tmp_path / "minutes-2.pdf").exists()


class TestSeed:
    """Test demo data loading"""

    def test_seed_populates_empty_store(self):
        now = datetime(2024, 6, 10, 8, 0)
        storage = MemoryStorage(clock=lambda: now)
        seed_demo_data(storage)

        assert len(storage.jurisdictions.list()) == len(DEMO_JURISDICTIONS)
        assert len(storage.professionals.list()) == len(DEMO_PROFESSIONALS)
        assert storage.get_user_by_username("admin").role == "admin"
        assert len(storage.hearings_by_date(now.date())) == 1
        assert len(storage.hearings_by_date(now.date() + timedelta(days=1))) == 2
        assert len(storage.pending_assignment_hearings()) == 1
        assert len(storage.tasks_by_status("pending")) == 3

    def test_seed_skips_non_empty_store(self):
        storage = MemoryStorage()
        storage.jurisdictions.create({"name": "Existing", "state": "SP", "city": "X", "address": "Y"})

        seed_demo_data(storage)

        assert len(storage.jurisdictions.list()) == 1
        assert storage.professionals.list() == []


class TestSettings:
    """Test settings helpers"""

    def test_cors_origins_parsed(self):
        settings = Settings(cors_allow_origins=" http://a.test/ , 'http://b.test',, ")
        assert settings.cors_origins() == ["http://a.test", "http://b.test"]

    def test_unknown_backend_warned(self):
        warnings = Settings(storage_backend="mongo").validate_storage_config()
        assert any("unknown" in w for w in warnings)

    def test_sql_backend_has_no_warnings(self):
        assert Settings(storage_backend="sql").validate_storage_config() == []

    def test_sql_backend_needs_sqlite_url(self):
        warnings = Settings(storage_backend="sql", database_url="postgresql://db/juriscrm").validate_storage_config()
        assert any("sqlite" in w for w in warnings)


class TestRunner:
    """Test the uvicorn entry point"""

    def test_main_uses_settings(self, monkeypatch):
        import uvicorn
        from juriscrm import run

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
        monkeypatch.setattr(run, "get_settings", lambda: Settings(api_host="127.0.0.1", api_port=9001))

        run.main()

        assert calls == [("juriscrm.api:app", {
            "host": "127.0.0.1", "port": 9001, "reload": False, "log_level": "info",
        })]
