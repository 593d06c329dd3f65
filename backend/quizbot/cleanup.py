from __future__ import annotations
from datetime import datetime, timedelta
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import QuizSession


def purge_older_than(db: Session, days: int) -> int:
	threshold = datetime.utcnow() - timedelta(days=days)
	res = db.execute(delete(QuizSession).where(QuizSession.created_at < threshold))
	db.commit()
	return res.rowcount or 0
