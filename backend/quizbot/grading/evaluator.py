from __future__ import annotations
import asyncio
import logging
from typing import Optional

from ..openai_client import TextGenerator
from ..schemas import Evaluation, Question
from . import scoring
from .parsing import ParseFailure, parse_model_response
from .prompts import build_grading_prompt


logger = logging.getLogger(__name__)


class AnswerEvaluator:
	"""
	Grades a transcript against a question's key phrases.

	The language model is tried first when a configured generator is given.
	Anything that goes wrong on that path (missing configuration, network
	errors, timeouts, unusable output) falls back to the deterministic
	key-phrase scorer, so :meth:`evaluate` always returns an Evaluation for
	valid input. There are no retries.

	Instances hold no per-call state and can serve concurrent evaluations.
	"""

	def __init__(
		self,
		generator: Optional[TextGenerator] = None,
		*,
		max_tokens: int = 400,
		temperature: Optional[float] = 0.0,
		timeout_seconds: Optional[float] = 30.0,
	) -> None:
		self.generator = generator
		self.max_tokens = max_tokens
		self.temperature = temperature
		self.timeout_seconds = timeout_seconds

	async def evaluate(self, transcript: str, question: Question) -> Evaluation:
		if question is None:
			raise ValueError("question is required")
		if not isinstance(transcript, str):
			raise ValueError("transcript must be a string")

		model_result = await self._evaluate_with_model(transcript, question)
		if model_result is not None:
			return model_result
		return scoring.score(transcript, question.key_phrases)

	async def _evaluate_with_model(self, transcript: str, question: Question) -> Optional[Evaluation]:
		generator = self.generator
		if generator is None or not generator.configured:
			logger.info("Model grading not configured for question %s; using key-phrase scoring", question.id)
			return None

		prompt = build_grading_prompt(transcript, question)
		try:
			raw = await asyncio.wait_for(
				generator.generate(prompt, max_tokens=self.max_tokens, temperature=self.temperature),
				timeout=self.timeout_seconds,
			)
		except asyncio.TimeoutError:
			logger.warning(
				"Model grading timed out after %ss for question %s; falling back",
				self.timeout_seconds,
				question.id,
			)
			return None
		except Exception as e:
			logger.warning("Model grading failed for question %s; falling back: %s", question.id, e)
			return None

		result = parse_model_response(raw)
		if isinstance(result, ParseFailure):
			logger.warning(
				"Unusable model output for question %s (%s); falling back. Output: %r",
				question.id,
				result.reason,
				result.snippet,
			)
			return None
		logger.debug("Model graded question %s: score=%s", question.id, result.score)
		return result
