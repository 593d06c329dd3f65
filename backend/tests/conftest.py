import asyncio
from typing import List, Optional

import pytest
from sqlalchemy.pool import StaticPool

from quizbot.db import init_db, make_engine, make_sessionmaker
from quizbot.schemas import Question


class FakeGenerator:
	"""Stand-in for the Azure OpenAI client."""

	def __init__(self, reply: str = "", *, error: Optional[BaseException] = None, delay: float = 0.0, configured: bool = True):
		self.reply = reply
		self.error = error
		self.delay = delay
		self._configured = configured
		self.prompts: List[str] = []
		self.calls: List[dict] = []

	@property
	def configured(self) -> bool:
		return self._configured

	async def generate(self, prompt, *, max_tokens, temperature=None):
		self.prompts.append(prompt)
		self.calls.append({"max_tokens": max_tokens, "temperature": temperature})
		if self.delay:
			await asyncio.sleep(self.delay)
		if self.error is not None:
			raise self.error
		return self.reply


@pytest.fixture
def egypt_question():
	return Question(
		id="q1",
		topic="World History",
		difficulty="easy",
		heading="Ancient Civilizations",
		question="Describe three key achievements of the ancient Egyptians.",
		key_phrases=["pyramids", "hieroglyphics", "irrigation", "mummification"],
	)


@pytest.fixture
def cell_question():
	return Question(
		id="q2",
		question="What are the main differences between prokaryotic and eukaryotic cells?",
		key_phrases=["nucleus", "membrane-bound organelles", "size", "ribosomes"],
	)


@pytest.fixture
def db_session():
	engine = make_engine("sqlite://", poolclass=StaticPool)
	init_db(engine)
	TestingSession = make_sessionmaker(engine)
	db = TestingSession()
	try:
		yield db
	finally:
		db.close()
		engine.dispose()
