"""
Database seeds - demo content items shown on a fresh dashboard.
"""
from sqlalchemy.orm import Session

from modreview.core.logging import get_logger
from modreview.db.repository import ContentItemRepository, ModerationRepository
from modreview.items.demo import demo_items

logger = get_logger("db.seeds")


def seed_demo_items(session: Session) -> int:
    """
    Insert the demo items (and their stored analysis) if absent.

    Returns the number of items created.
    """
    items = ContentItemRepository(session)
    moderation = ModerationRepository(session)
    created = 0

    for item in demo_items():
        if items.exists(item.id):
            continue
        logger.info(f"Creating demo item '{item.id}'")
        items.create(item)
        moderation.upsert(item.id, item.moderation)
        created += 1

    logger.info(f"Seeded {created} demo items")
    return created


def run_all_seeds(session: Session) -> None:
    """Run all database seeds."""
    seed_demo_items(session)
