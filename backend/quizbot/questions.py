from __future__ import annotations
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .schemas import Question


logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^(Heading|Difficulty|Topic|Question|KeyPhrases):\s*(.*)$", re.IGNORECASE)


def parse_question_blocks(text: str) -> List[Question]:
	"""Parse plain-text question blocks.

	Expected layout, one field per line::

		Heading: Ancient Civilizations
		Difficulty: easy
		Topic: World History
		Question: Describe three key achievements of the ancient Egyptians.
		KeyPhrases: pyramids, hieroglyphics, irrigation, mummification

	A ``Heading:`` line closes the previous block if it has question text.
	Unlabelled lines (other than ``#`` comments) continue the question text.
	Ids are assigned in order as ``q1``, ``q2``, ...; blocks without question
	text are dropped.
	"""
	questions: List[Question] = []
	current: Dict[str, Any] = {}

	def _close() -> None:
		if current.get("question"):
			current.setdefault("id", f"q{len(questions) + 1}")
			questions.append(Question(**current))
		current.clear()

	for raw_line in (text or "").splitlines():
		line = raw_line.strip()
		if not line:
			continue
		m = _LABEL_RE.match(line)
		if not m:
			if current.get("question") and not line.startswith("#"):
				current["question"] += " " + line
			continue
		label, value = m.group(1).lower(), m.group(2).strip()
		if label == "heading":
			if current.get("question"):
				_close()
			current["heading"] = value
		elif label == "keyphrases":
			current["key_phrases"] = [p.strip() for p in value.split(",") if p.strip()]
			current["id"] = f"q{len(questions) + 1}"
		else:
			current[label] = value
	_close()
	return questions


def load_questions(path: str | Path) -> List[Question]:
	"""Load the question bank; a missing or broken file gives an empty bank."""
	p = Path(path)
	try:
		text = p.read_text(encoding="utf-8")
	except OSError as exc:
		logger.warning("Question bank %s not readable: %s", p, exc)
		return []
	if p.suffix.lower() == ".txt":
		return parse_question_blocks(text)
	try:
		data = json.loads(text)
		if not isinstance(data, list):
			raise ValueError("question bank must be a JSON array")
		return [Question(**item) for item in data]
	except (ValueError, TypeError, ValidationError) as exc:
		logger.warning("Question bank %s is invalid: %s", p, exc)
		return []


def question_at(questions: List[Question], idx: int) -> Optional[Question]:
	if idx < 0 or idx >= len(questions):
		return None
	return questions[idx]
