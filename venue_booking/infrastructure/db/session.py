# venue_booking/infrastructure/db/session.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.engine import Engine
from contextlib import contextmanager
from dotenv import load_dotenv
import os

load_dotenv()


# -----------------------------
# Database URL
# -----------------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./venue_booking.db")


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across FastAPI's worker threads.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# -----------------------------
# Engine
# -----------------------------
engine: Engine = create_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,
    connect_args=_connect_args(DATABASE_URL),
)


# -----------------------------
# Base Class for Models
# -----------------------------
class Base(DeclarativeBase):
    pass


# -----------------------------
# Session Factory
# -----------------------------
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


# -----------------------------
# Context Manager (Non-FastAPI usage)
# -----------------------------
@contextmanager
def get_db_session():
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
