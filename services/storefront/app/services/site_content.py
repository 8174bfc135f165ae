from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import uuid4

from services.storefront.app.db.models import SiteContent
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _text(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return str(value) if value else None


def get_section(db: Session, section: str) -> SiteContent | None:
    return db.query(SiteContent).filter(SiteContent.section == section).first()


def list_sections(db: Session) -> list[SiteContent]:
    return db.query(SiteContent).order_by(SiteContent.section.asc()).all()


def upsert_section(db: Session, section: str, data: dict[str, Any]) -> SiteContent:
    """Insert or replace the content for ``section``.

    Headline fields are lifted out of ``data`` (``imageUrl`` as sent by the admin editor);
    the whole payload is kept in ``additional_data``.
    """

    row = get_section(db, section)
    now = datetime.utcnow()
    if row is None:
        row = SiteContent(id=uuid4().hex, section=section, created_at=now)
        db.add(row)

    row.title = _text(data, "title")
    row.subtitle = _text(data, "subtitle")
    row.description = _text(data, "description")
    row.image_url = _text(data, "imageUrl")
    row.additional_data = dict(data)
    row.updated_at = now

    try:
        db.commit()
    except IntegrityError:
        # Another editor created the section first; apply this payload on top of theirs.
        db.rollback()
        if get_section(db, section) is None:
            raise
        return upsert_section(db, section, data)

    logger.info("Site content saved", extra={"section": section})
    return row
