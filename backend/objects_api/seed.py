"""
Seed data for development.
Creates a small page tree and a couple of posts.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from objects_api.models import StoredObject
from shared.config.constants import ObjectStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit

logger = get_logger(__name__)


def seed(db: Session) -> None:
    """
    Seed demo objects.
    Idempotent: only inserts if the store is empty.
    """
    if db.scalar(select(StoredObject.id).limit(1)):
        logger.info("Objects already seeded, skipping")
        return

    about = StoredObject(object_type="page", name="about", title="About", content="About us.")
    db.add(about)
    db.flush()

    db.add_all([
        StoredObject(
            object_type="page",
            name="team",
            title="Team",
            content="Who we are.",
            parent_id=about.id,
            menu_order=1,
        ),
        StoredObject(
            object_type="page",
            name="history",
            title="History",
            content="Where we come from.",
            parent_id=about.id,
            menu_order=2,
        ),
        StoredObject(object_type="post", name="hello-world", title="Hello world", content="First post."),
        StoredObject(
            object_type="post",
            name="upcoming",
            title="Upcoming",
            content="Not ready yet.",
            status=ObjectStatus.DRAFT,
        ),
    ])
    safe_commit(db)
    logger.info("Seeded demo objects", count=5)
