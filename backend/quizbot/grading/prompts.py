from __future__ import annotations

from ..schemas import Question
from .scoring import normalize_phrases


def build_grading_prompt(transcript: str, question: Question) -> str:
	"""Build the grading instruction sent to the language model.

	The model is asked for strict JSON with the same four fields as
	:class:`~quizbot.schemas.Evaluation`, so its reply can be parsed straight
	into one.
	"""
	key_phrases = normalize_phrases(question.key_phrases)
	return "\n\n".join([
		"You are an automated deterministic grader. Output ONLY valid JSON with exactly these fields: "
		"score (0-100 integer), matched_phrases (array), missing_phrases (array), feedback (string).",
		f"Question: {question.question or ''}",
		f"Expected key phrases: {', '.join(key_phrases)}",
		f"Student answer (transcript): {transcript}",
		"Scoring rules: match phrases case-insensitively. Give a proportional score based on the number of "
		"key phrases matched. Provide concise feedback and hints for missing phrases.",
		"Output JSON now.",
	])
