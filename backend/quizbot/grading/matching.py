from __future__ import annotations
from typing import List


def phrase_tokens(phrase: str) -> List[str]:
	"""Lower-cased whitespace tokens of a key phrase."""
	return (phrase or "").lower().split()


def matches(transcript: str, phrase: str) -> bool:
	"""Return True when every token of ``phrase`` occurs in ``transcript``.

	Matching is case-insensitive and works per token: each token only has to
	appear somewhere in the transcript as a substring, in any order and not
	necessarily as a whole word. "membrane-bound" therefore does not match
	"membrane bound" (no hyphen normalization), while "cell" matches "cells".

	Args:
		transcript: The user's answer, possibly empty
		phrase: A key phrase made of one or more whitespace-separated tokens

	Returns:
		Whether the phrase counts as mentioned. A blank phrase never matches.
	"""
	tokens = phrase_tokens(phrase)
	if not tokens:
		return False
	low = (transcript or "").lower()
	return all(tok in low for tok in tokens)
