from __future__ import annotations
import json
import math
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ValidationError

from ..schemas import Evaluation


SNIPPET_CHARS = 200


class ParseFailure(BaseModel):
	"""Model output that could not be turned into an Evaluation."""
	reason: str
	snippet: str = ""


ParseResult = Union[Evaluation, ParseFailure]


def _fail(reason: str, text: Any) -> ParseFailure:
	return ParseFailure(reason=reason, snippet=str(text or "")[:SNIPPET_CHARS])


def _coerce_score(value: Any) -> Optional[int]:
	# bool is an int subclass; "true" is not a score
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		return None
	if isinstance(value, float):
		if not math.isfinite(value):
			return None
		value = math.floor(value + 0.5)
	if value < 0 or value > 100:
		return None
	return int(value)


def _string_list(value: Any) -> Optional[List[str]]:
	if value is None:
		return []
	if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
		return None
	return list(value)


def extract_json_object(text: str) -> Optional[str]:
	"""Return the text from the first ``{`` to the last ``}``, or None."""
	if not isinstance(text, str):
		return None
	first = text.find("{")
	last = text.rfind("}")
	if first < 0 or last < 0 or last < first:
		return None
	return text[first:last + 1]


def parse_model_response(raw: str) -> ParseResult:
	"""Parse an Evaluation out of free-form model output.

	The JSON object is taken from the first ``{`` to the last ``}`` so prose
	around it is ignored. The object is then checked before it is trusted:
	``score`` must be a number in 0-100 (fractions round half-up),
	``matched_phrases``/``missing_phrases`` must be arrays of strings when
	present, and ``feedback`` must be a string when present.

	Never raises. Unusable output comes back as a :class:`ParseFailure`.
	"""
	block = extract_json_object(raw)
	if block is None:
		return _fail("no JSON object found", raw)
	# ValueError covers JSONDecodeError and over-long integer literals
	try:
		data = json.loads(block)
	except (ValueError, RecursionError) as exc:
		return _fail(f"malformed JSON: {exc}", raw)
	if not isinstance(data, dict):
		return _fail("JSON value is not an object", raw)

	if "score" not in data:
		return _fail("missing score", raw)
	score = _coerce_score(data.get("score"))
	if score is None:
		return _fail(f"invalid score: {data.get('score')!r}", raw)
	matched = _string_list(data.get("matched_phrases"))
	if matched is None:
		return _fail("matched_phrases is not an array of strings", raw)
	missing = _string_list(data.get("missing_phrases"))
	if missing is None:
		return _fail("missing_phrases is not an array of strings", raw)
	feedback = data.get("feedback")
	if feedback is None:
		feedback = ""
	if not isinstance(feedback, str):
		return _fail("feedback is not a string", raw)

	try:
		return Evaluation(
			score=score,
			matched_phrases=matched,
			missing_phrases=missing,
			feedback=feedback,
		)
	except ValidationError as exc:
		return _fail(f"invalid evaluation: {exc}", raw)
