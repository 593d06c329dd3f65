from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base


class QuizSession(Base):
	__tablename__ = "quiz_sessions"
	# One row per graded answer; a quiz session spans several rows
	id = Column(Integer, primary_key=True, autoincrement=True)
	session_id = Column(String(64), index=True, nullable=False)
	question_id = Column(String(128), nullable=False)
	transcript = Column(Text, nullable=False, default="")
	score = Column(Integer, nullable=False)
	evaluation_json = Column(Text, nullable=False)  # JSON string of the Evaluation
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
