"""
Database session management (SQLAlchemy)

Engine и фабрика сессий создаются лениво при первом запросе, чтобы импорт
приложения (и тесты с SQLite) не требовали доступного PostgreSQL.
"""
import logging
from typing import Iterator

import psycopg
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from subscriptions_service.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for the subscriptions schema"""


_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine(settings.get_sqlalchemy_url(), pool_pre_ping=True)
        logger.info("Database engine created dialect=%s", _engine.dialect.name)
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=True)
    return _SessionLocal


def get_db() -> Iterator[Session]:
    """
    Request-scoped session for FastAPI routes

    Незакоммиченные изменения откатываются, если обработчик упал.
    """
    db = get_session_factory()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection() -> bool:
    """
    Readiness probe: SELECT 1 через raw psycopg

    Returns:
        True если PostgreSQL отвечает, иначе False (ошибка пишется в лог)
    """
    dsn = get_settings().get_psycopg_dsn()
    try:
        with psycopg.connect(dsn, connect_timeout=3) as conn:
            conn.execute("SELECT 1").fetchone()
    except psycopg.Error as exc:
        logger.warning("Database is not reachable: %s", exc)
        return False
    return True
