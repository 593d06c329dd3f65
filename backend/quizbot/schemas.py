from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Question(BaseModel):
	"""
	A quiz question and the key phrases a good answer should mention.

	Key phrases are trimmed and blank ones are dropped on construction, so the
	grading code only ever sees non-empty phrases. Duplicates are kept here and
	collapsed when scoring.
	"""
	model_config = ConfigDict(frozen=True)

	id: str
	question: str
	key_phrases: List[str] = Field(default_factory=list)
	topic: Optional[str] = None
	difficulty: Optional[str] = None
	heading: Optional[str] = None

	@field_validator("key_phrases", mode="before")
	@classmethod
	def _clean_key_phrases(cls, value):
		if value is None:
			return []
		if isinstance(value, str):
			value = value.split(",")
		return [str(p).strip() for p in value if p is not None and str(p).strip()]


class Evaluation(BaseModel):
	"""Graded answer: 0-100 score, matched/missing key phrases and feedback."""
	model_config = ConfigDict(frozen=True)

	score: int = Field(ge=0, le=100)
	matched_phrases: List[str] = Field(default_factory=list)
	missing_phrases: List[str] = Field(default_factory=list)
	feedback: str = ""
