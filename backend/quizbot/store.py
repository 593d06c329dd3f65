from __future__ import annotations
import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import QuizSession
from .schemas import Evaluation


logger = logging.getLogger(__name__)

# Longest transcript kept in a stored quiz result
MAX_STORED_TRANSCRIPT_CHARS = 8000


def new_session_id() -> str:
	return f"s-{uuid.uuid4().hex}"


def save_session(
	db: Session,
	*,
	session_id: Optional[str],
	question_id: str,
	transcript: str,
	evaluation: Evaluation,
) -> QuizSession:
	"""Persist one graded answer and return the stored row.

	Transcripts longer than ``MAX_STORED_TRANSCRIPT_CHARS`` are cut to that
	length; grading has already seen the full text.
	"""
	session_id = session_id or new_session_id()
	if len(transcript) > MAX_STORED_TRANSCRIPT_CHARS:
		logger.info(
			"Transcript for session %s question %s cut from %d to %d characters",
			session_id,
			question_id,
			len(transcript),
			MAX_STORED_TRANSCRIPT_CHARS,
		)
		transcript = transcript[:MAX_STORED_TRANSCRIPT_CHARS]
	row = QuizSession(
		session_id=session_id,
		question_id=question_id,
		transcript=transcript,
		score=evaluation.score,
		evaluation_json=evaluation.model_dump_json(),
	)
	db.add(row)
	db.commit()
	db.refresh(row)
	return row


def list_sessions(db: Session, session_id: str) -> List[QuizSession]:
	stmt = select(QuizSession).where(QuizSession.session_id == session_id).order_by(QuizSession.id)
	return list(db.execute(stmt).scalars())


def row_evaluation(row: QuizSession) -> Evaluation:
	return Evaluation.model_validate_json(row.evaluation_json)
