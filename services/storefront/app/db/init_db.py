from __future__ import annotations

import logging
import os

from services.storefront.app.db.database import get_engine
from services.storefront.app.db.models import Base
from sqlalchemy import inspect

logger = logging.getLogger(__name__)


def auto_create_enabled() -> bool:
    return os.getenv("LUMIDUMI_DB_AUTO_CREATE", "true").strip().lower() in {"1", "true", "yes", "y"}


def init_db() -> list[str]:
    """Create any missing storefront tables; returns the names of the tables it created.

    Deployments with managed migrations set LUMIDUMI_DB_AUTO_CREATE=false and get ``[]``.
    """

    if not auto_create_enabled():
        logger.info("Table auto-create disabled")
        return []

    engine = get_engine()
    existing = set(inspect(engine).get_table_names())

    Base.metadata.create_all(bind=engine)

    created = sorted(set(Base.metadata.tables) - existing)
    if created:
        logger.info("Created tables", extra={"tables": created})
    return created
