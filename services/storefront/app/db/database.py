from __future__ import annotations

import logging
import os
from typing import Any

from sqlalchemy import Engine, create_engine, make_url
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None
_SESSIONMAKER: sessionmaker | None = None


def _default_db_url() -> str:
    # Local-only default. Deployments must provide DATABASE_URL explicitly.
    return "sqlite+pysqlite:///./lumidumi.db"


def _engine_kwargs(url: str) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "future": True,
        "echo": os.getenv("LUMIDUMI_SQL_ECHO", "").strip().lower() in {"1", "true", "yes"},
    }
    if url.startswith("sqlite"):
        # Request handlers run in a threadpool; the connection outlives the creating thread.
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return kwargs


def get_engine() -> Engine:
    """Return the engine for the current DATABASE_URL.

    Rebuilt whenever the URL changes, so each test can point the app at its own sqlite file.
    """

    global _ENGINE, _ENGINE_URL, _SESSIONMAKER

    url = os.getenv("DATABASE_URL", _default_db_url())
    if _ENGINE is not None and _ENGINE_URL == url:
        return _ENGINE

    _ENGINE = create_engine(url, **_engine_kwargs(url))
    _ENGINE_URL = url
    _SESSIONMAKER = sessionmaker(bind=_ENGINE, class_=Session, autocommit=False, autoflush=False)
    logger.info(
        "Database engine created",
        extra={"url": make_url(url).render_as_string(hide_password=True)},
    )
    return _ENGINE


def db_session() -> Session:
    get_engine()
    assert _SESSIONMAKER is not None
    return _SESSIONMAKER()
