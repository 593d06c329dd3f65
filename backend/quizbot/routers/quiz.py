"""
Quiz Module
===========

Serves questions from the question bank and grades spoken answers.

The browser transcribes the user's answer and posts the transcript together
with the question; grading goes through :class:`AnswerEvaluator` (Azure
OpenAI first, key-phrase scoring as fallback) and every graded answer is
stored as a quiz session row.

API Endpoints:
- GET /quiz/nextquestion: Question at index ``idx`` plus the next index
- POST /quiz/evaluate: Grade a transcript and store the result
- GET /quiz/sessions/{session_id}: Stored results of a session
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import AsyncIterator, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..grading import AnswerEvaluator
from ..openai_client import AzureOpenAIClient, load_openai_config
from ..questions import load_questions, question_at
from ..schemas import Evaluation, Question
from ..secrets import get_secret_source
from ..settings import settings
from ..store import list_sessions, new_session_id, row_evaluation, save_session


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["quiz"])

BASE_DIR = Path(__file__).resolve().parents[3]


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class NextQuestionResponse(BaseModel):
	question: Optional[Question] = None
	next_index: int


class EvaluateRequest(BaseModel):
	"""
	Graded answer submission.

	Both fields are optional in the schema so that a missing one is reported
	as a plain 400 rather than a validation error listing.
	"""
	transcript: Optional[str] = None
	question: Optional[Question] = None
	session_id: Optional[str] = None


class EvaluateResponse(BaseModel):
	evaluation: Evaluation
	session_id: str


class SessionResult(BaseModel):
	question_id: str
	transcript: str
	evaluation: Evaluation


class SessionResponse(BaseModel):
	session_id: str
	results: List[SessionResult]


# ============================================================================
# DEPENDENCIES
# ============================================================================

def _resolve_questions_path(path: str) -> Path:
	p = Path(path)
	if p.is_absolute() or p.exists():
		return p
	return BASE_DIR / p


@lru_cache(maxsize=1)
def get_questions() -> List[Question]:
	questions = load_questions(_resolve_questions_path(settings.questions_path))
	logger.info("Loaded %d questions", len(questions))
	return questions


async def get_evaluator() -> AsyncIterator[AnswerEvaluator]:
	"""Evaluator wired to Azure OpenAI, closed again after the request."""
	secrets = get_secret_source(settings)
	try:
		config = await load_openai_config(settings, secrets)
	finally:
		close_secrets = getattr(secrets, "aclose", None)
		if close_secrets is not None:
			await close_secrets()
	client = AzureOpenAIClient(config, timeout=settings.openai_timeout_seconds)
	try:
		yield AnswerEvaluator(
			client,
			max_tokens=settings.openai_max_tokens,
			temperature=settings.openai_temperature,
			timeout_seconds=settings.openai_timeout_seconds,
		)
	finally:
		await client.aclose()


# ============================================================================
# API ENDPOINTS
# ============================================================================

@router.get("/nextquestion", response_model=NextQuestionResponse)
async def next_question(idx: str = "0", questions: List[Question] = Depends(get_questions)):
	try:
		index = max(0, int(idx))
	except ValueError:
		index = 0
	return NextQuestionResponse(question=question_at(questions, index), next_index=index + 1)


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(
	req: EvaluateRequest,
	evaluator: AnswerEvaluator = Depends(get_evaluator),
	db: Session = Depends(get_db),
):
	"""Grade a transcript against its question and store the result.

	Raises:
		HTTPException: 400 if transcript or question is missing, 500 if the
		result cannot be stored
	"""
	if req.transcript is None or req.question is None:
		raise HTTPException(status_code=400, detail="Missing fields")

	evaluation = await evaluator.evaluate(req.transcript, req.question)
	session_id = req.session_id or new_session_id()
	try:
		save_session(
			db,
			session_id=session_id,
			question_id=req.question.id,
			transcript=req.transcript,
			evaluation=evaluation,
		)
	except Exception as e:
		db.rollback()
		logger.exception("Failed to store quiz session %s", session_id)
		raise HTTPException(status_code=500, detail=f"Failed to store session: {e}")
	return EvaluateResponse(evaluation=evaluation, session_id=session_id)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, db: Session = Depends(get_db)):
	rows = list_sessions(db, session_id)
	if not rows:
		raise HTTPException(status_code=404, detail="Session not found")
	return SessionResponse(
		session_id=session_id,
		results=[
			SessionResult(question_id=r.question_id, transcript=r.transcript, evaluation=row_evaluation(r))
			for r in rows
		],
	)
