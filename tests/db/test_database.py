"""
DatabaseManager tests: file-backed SQLite setup and initialization failures.
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from db.database import DatabaseManager
from db.errors import PersistenceError, StoreFailure
from db.models import Base


class TestDatabaseManager:

    async def test_creates_missing_directory(self, tmp_path):
        db_file = tmp_path / "data" / "nested" / "intro.db"
        manager = DatabaseManager(f"sqlite+aiosqlite:///{db_file}")
        try:
            await manager.initialize()
            assert manager.is_initialized
            assert db_file.exists()
        finally:
            await manager.close()

    async def test_unopenable_database_is_store_failure(self, tmp_path):
        # the database path is a directory, so sqlite cannot open it
        manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path}")

        with pytest.raises(StoreFailure) as exc_info:
            await manager.initialize()

        assert isinstance(exc_info.value, PersistenceError)
        assert exc_info.value.operation == "initialize"
        assert isinstance(exc_info.value.cause, SQLAlchemyError)
        assert manager.is_initialized is False
        assert manager.engine is None

    def test_in_memory_has_no_file(self):
        manager = DatabaseManager()
        assert manager._sqlite_file_path() is None

    async def test_relations_cover_all_tables(self, db_manager: DatabaseManager):
        assert set(db_manager.relations) == set(Base.metadata.tables)
