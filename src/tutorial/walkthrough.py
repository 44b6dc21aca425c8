"""
A conversational introduction to the persistence layer

Runs the two-part tour top to bottom against a fresh database:

- Part 1: create articles and read them back through the repository
- Part 2: categories, aggregated reads and update commands

Nothing here recovers from errors: any PersistenceError ends the tour.
"""

from typing import Any, Dict, Optional

from rich.console import Console
from sqlalchemy import text

from db.database import DatabaseManager
from repositories import ArticleRepository, CategoryRepository
from tutorial import ui
from utils.logger import get_logger

logger = get_logger("OrmIntro")


async def run_walkthrough(
    db_manager: DatabaseManager,
    out: Optional[Console] = None,
) -> Dict[str, Any]:
    """
    Play the walkthrough

    Args:
        db_manager: initialized (or lazily initializing) database manager
        out: console to narrate to, the shared rich console by default

    Returns:
        what each step returned, keyed by step name
    """
    summary: Dict[str, Any] = {}

    # ========================================
    # Part 1: relations, repositories and create commands
    # ========================================

    ui.print_part("Part 1: relations, repositories and create commands", out)

    async with db_manager.session() as session:
        repo = ArticleRepository(session)

        ui.print_step("Let's create our first article. It's not ready yet, so unpublished.", out)
        first = await repo.create({"title": "Hello rom-rb", "published": False})
        ui.print_result('repo.create({"title": "Hello rom-rb", "published": False})', first, out)
        summary["first"] = first

        ui.print_step("Nothing is published, so the published list is empty.", out)
        summary["published_before"] = await repo.list_published()
        ui.print_result("repo.list_published()", summary["published_before"], out)

        ui.print_step("But we can still fetch it by id, with no categories yet.", out)
        summary["first_by_id"] = await repo.find_by_id(first.id)
        ui.print_result(f"repo.find_by_id({first.id})", summary["first_by_id"], out)

        ui.print_step("Now a second article, published straight away.", out)
        second = await repo.create({"title": "An alien or sutin", "published": True})
        ui.print_result('repo.create({"title": "An alien or sutin", "published": True})', second, out)
        summary["second"] = second

        summary["published_after"] = await repo.list_published()
        ui.print_result("repo.list_published()", summary["published_after"], out)

    # ========================================
    # Part 2: types, associations and update commands
    # ========================================

    ui.print_part("Part 2: types, associations and update commands", out)

    ui.print_step(
        "Seed two categories and link both to our first article, "
        "sneaking in a few lines of SQL.",
        out,
    )
    async with db_manager.connection() as conn:
        # link only the rows inserted here, the database may already hold these names
        category_ids = []
        for name in ("dry-rb", "rom-rb"):
            result = await conn.execute(
                text("INSERT INTO categories (name) VALUES (:name)"),
                {"name": name},
            )
            category_ids.append(result.lastrowid)
        await conn.execute(
            text(
                "INSERT INTO articles_categories (article_id, category_id) "
                "VALUES (:article_id, :category_id)"
            ),
            [{"article_id": first.id, "category_id": category_id} for category_id in category_ids],
        )
    logger.info(f"Seeded categories {category_ids} for article {first.id}")

    async with db_manager.session() as session:
        repo = ArticleRepository(session)

        ui.print_step("Our article comes back wrapped up with both of its categories.", out)
        summary["first_with_categories"] = await repo.find_by_id(first.id)
        ui.print_result(f"repo.find_by_id({first.id})", summary["first_with_categories"], out)

        ui.print_step("The update command only ever touches the article we name.", out)
        summary["updated"] = await repo.update_by_id(first.id, {"title": "new title"})
        ui.print_result(f'repo.update_by_id({first.id}, {{"title": "new title"}})', summary["updated"], out)

        summary["updated_title"] = (await repo.find_by_id(first.id)).title
        ui.print_result(f"repo.find_by_id({first.id}).title", summary["updated_title"], out)

        ui.print_step("And without any SQL this time: a category linked through the repositories.", out)
        category = await CategoryRepository(session).create({"name": "sqlalchemy"})
        ui.print_result('category_repo.create({"name": "sqlalchemy"})', category, out)

        summary["second_with_category"] = await repo.add_category(second.id, category.id)
        ui.print_result(
            f"repo.add_category({second.id}, {category.id})",
            summary["second_with_category"],
            out,
        )

        summary["published_final"] = await repo.list_published()
        ui.print_result("repo.list_published()", summary["published_final"], out)

    return summary
