"""
End-to-end walkthrough test plus configuration and logging plumbing.
"""

import io
import logging

import pytest
from rich.console import Console

from db.database import DatabaseManager
from tutorial import IntroConfig, run_walkthrough
from utils.logger import get_logger, set_global_debug


async def test_walkthrough_summary(db_manager: DatabaseManager):
    out = Console(file=io.StringIO(), width=200)
    summary = await run_walkthrough(db_manager, out)

    first = summary["first"]
    assert first.title == "Hello rom-rb"
    assert summary["published_before"] == []
    assert summary["first_by_id"] == first
    assert [a.title for a in summary["published_after"]] == ["An alien or sutin"]

    names = {c.name for c in summary["first_with_categories"].categories}
    assert names == {"dry-rb", "rom-rb"}

    assert summary["updated"].title == "new title"
    assert summary["updated_title"] == "new title"
    assert {c.name for c in summary["updated"].categories} == names

    assert [c.name for c in summary["second_with_category"].categories] == ["sqlalchemy"]
    assert [a.id for a in summary["published_final"]] == [summary["second"].id]


async def test_walkthrough_narrates_results(db_manager: DatabaseManager):
    buffer = io.StringIO()
    await run_walkthrough(db_manager, Console(file=buffer, width=200))

    output = buffer.getvalue()
    assert "Part 1" in output
    assert "Part 2" in output
    assert "#<Category id=1 name='dry-rb'>" in output
    assert "'new title'" in output


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("ORMINTRO_DATABASE_URL", "sqlite+aiosqlite:///tmp/intro.db")
    monkeypatch.setenv("ORMINTRO_ECHO_SQL", "true")

    config = IntroConfig()
    assert config.DATABASE_URL == "sqlite+aiosqlite:///tmp/intro.db"
    assert config.ECHO_SQL is True
    assert config.DEBUG is False


def test_global_debug_switch():
    logger = get_logger("OrmIntroTest")
    assert get_logger("OrmIntroTest") is logger

    set_global_debug(True)
    try:
        assert logger.logger.level == logging.DEBUG
    finally:
        set_global_debug(False)
    assert logger.logger.level == logging.INFO


async def test_walkthrough_rerun_links_only_new_categories(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'intro.db'}"

    for run in range(2):
        manager = DatabaseManager(url)
        try:
            await manager.initialize()
            summary = await run_walkthrough(manager, Console(file=io.StringIO(), width=200))
        finally:
            await manager.close()

        categories = summary["first_with_categories"].categories
        assert sorted(c.name for c in categories) == ["dry-rb", "rom-rb"]
        assert len({c.id for c in categories}) == 2

    # categories 1-3 belong to the first run
    assert summary["first"].id == 3
    assert {c.id for c in categories} == {4, 5}


def test_launcher_exits_on_persistence_error(monkeypatch):
    import run_intro
    from repositories.base import NotFoundError

    async def failing_walkthrough(db_manager, out=None):
        raise NotFoundError("Article", 1)

    monkeypatch.setattr(run_intro, "run_walkthrough", failing_walkthrough)
    monkeypatch.setattr("sys.argv", ["run_intro.py"])

    with pytest.raises(SystemExit) as exc_info:
        run_intro.main()
    assert exc_info.value.code == 1


def test_launcher_exits_on_unopenable_database(monkeypatch, tmp_path):
    import run_intro

    monkeypatch.setattr("sys.argv", ["run_intro.py", "--database-url", f"sqlite+aiosqlite:///{tmp_path}"])

    with pytest.raises(SystemExit) as exc_info:
        run_intro.main()
    assert exc_info.value.code == 1
