from __future__ import annotations
from typing import Iterable, List

from ..schemas import Evaluation
from .matching import matches


ALL_MATCHED_FEEDBACK = "Excellent - covered all key points."
NOTHING_TO_CHECK_FEEDBACK = "This question has no key phrases to check."


def normalize_phrases(key_phrases: Iterable[str]) -> List[str]:
	"""Lower-case, trim and de-duplicate key phrases, keeping first-seen order.

	Blank phrases are dropped here rather than counted as always missing.
	"""
	seen = set()
	out: List[str] = []
	for phrase in key_phrases or []:
		p = (phrase or "").strip().lower()
		if not p or p in seen:
			continue
		seen.add(p)
		out.append(p)
	return out


def percent_score(matched: int, total: int) -> int:
	"""Percentage of matched phrases rounded half-up (1 of 8 -> 13).

	The denominator is ``max(1, total)`` so an empty phrase list scores 0.
	"""
	denom = max(1, total)
	# Integer form of floor(100 * matched / denom + 0.5)
	return (200 * matched + denom) // (2 * denom)


def build_feedback(matched: List[str], missing: List[str]) -> str:
	if not matched and not missing:
		return NOTHING_TO_CHECK_FEEDBACK
	if not missing:
		return ALL_MATCHED_FEEDBACK
	return f"You mentioned {len(matched)} key items. Missing: {', '.join(missing)}"


def score(transcript: str, key_phrases: Iterable[str]) -> Evaluation:
	"""Deterministic grading of ``transcript`` against ``key_phrases``.

	Never fails: any transcript (including an empty one) and any phrase list
	(including an empty one) produce a complete Evaluation.
	"""
	phrases = normalize_phrases(key_phrases)
	matched = [p for p in phrases if matches(transcript, p)]
	missing = [p for p in phrases if p not in matched]
	return Evaluation(
		score=percent_score(len(matched), len(phrases)),
		matched_phrases=matched,
		missing_phrases=missing,
		feedback=build_feedback(matched, missing),
	)
