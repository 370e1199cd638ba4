"""Database initialization for domainsweep."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from domainsweep.db.models import Base


def get_engine(db_path: Path) -> Engine:
    """Build a SQLite engine for *db_path*, creating its parent directory."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}", echo=False)


def init_db(db_path: Path) -> Engine:
    """Initialize the SQLite database with all tables."""
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
    return engine


def get_session(db_path: Path) -> Session:
    """Get a database session."""
    engine = init_db(db_path)
    session_factory = sessionmaker(bind=engine)
    return session_factory()
