from __future__ import annotations
from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./quizbot.db"

Base = declarative_base()


def make_engine(url: str, **kwargs: Any) -> Engine:
	"""Engine for ``url``; SQLite connections may be shared across threads."""
	connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
	return create_engine(url, connect_args=connect_args, future=True, **kwargs)


def make_sessionmaker(bind: Engine) -> sessionmaker:
	return sessionmaker(autocommit=False, autoflush=False, bind=bind, future=True)


engine = make_engine(DATABASE_URL)
SessionLocal = make_sessionmaker(engine)


def init_db(bind: Optional[Engine] = None) -> None:
	"""Create the quiz tables on ``bind`` (the app engine by default)."""
	from . import models  # noqa: F401  (registers tables on Base)
	Base.metadata.create_all(bind=bind or engine)


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()
