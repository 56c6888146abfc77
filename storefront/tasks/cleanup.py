# storefront/tasks/cleanup.py
from datetime import datetime, timezone, timedelta

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.cart_repo import SqlCartStorage
from storefront.utils.settings import CART_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def purge_stale_carts(db, now: datetime | None = None) -> int:
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=CART_TTL_SECONDS)
    deleted = SqlCartStorage(db).purge_older_than(cutoff)
    db.commit()
    return deleted


@celery_app.task(name="storefront.tasks.cleanup.purge_stale_carts_task")
def purge_stale_carts_task():
    logger.info("Purge stale carts task started")

    db = SessionLocal()
    try:
        deleted = purge_stale_carts(db)
        logger.info(f"Purged {deleted} stored carts/favorites")
        return deleted
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
