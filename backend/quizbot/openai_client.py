from __future__ import annotations
import httpx
from typing import Any, Dict, Optional, Protocol

from pydantic import BaseModel

from .secrets import SecretSource, lookup_secret
from .settings import Settings


class TextGenerationError(RuntimeError):
	"""The text-generation call could not produce text."""


class TextGenerator(Protocol):
	@property
	def configured(self) -> bool: ...

	async def generate(self, prompt: str, *, max_tokens: int, temperature: Optional[float] = None) -> str: ...


class OpenAIConfig(BaseModel):
	endpoint: Optional[str] = None
	api_key: Optional[str] = None
	deployment: Optional[str] = None
	api_version: str = "2024-06-01"

	@property
	def is_complete(self) -> bool:
		return all((v or "").strip() for v in (self.endpoint, self.api_key, self.deployment))


class AzureOpenAIClient:
	"""Azure OpenAI chat-completions client used for model-backed grading.

	A single attempt per call: failures surface as ``httpx.HTTPError`` or
	:class:`TextGenerationError` and the caller decides what to do with them.
	"""

	def __init__(
		self,
		config: OpenAIConfig,
		*,
		timeout: float = 30.0,
		client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self.config = config
		self._client = client or httpx.AsyncClient(timeout=timeout)
		self._owns_client = client is None

	@property
	def configured(self) -> bool:
		return self.config.is_complete

	@property
	def url(self) -> str:
		endpoint = (self.config.endpoint or "").strip().rstrip("/")
		deployment = (self.config.deployment or "").strip()
		return f"{endpoint}/openai/deployments/{deployment}/chat/completions"

	async def generate(self, prompt: str, *, max_tokens: int, temperature: Optional[float] = None) -> str:
		if not self.configured:
			raise TextGenerationError("Azure OpenAI is not configured")
		payload: Dict[str, Any] = {
			"messages": [{"role": "user", "content": prompt}],
			"max_tokens": int(max_tokens),
		}
		if temperature is not None:
			payload["temperature"] = float(temperature)
		headers = {"api-key": self.config.api_key or "", "Content-Type": "application/json"}
		params = {"api-version": self.config.api_version}
		r = await self._client.post(self.url, params=params, headers=headers, json=payload)
		r.raise_for_status()
		try:
			data = r.json()
			content = data["choices"][0]["message"]["content"]
		except Exception as exc:
			raise TextGenerationError(f"Unexpected Azure OpenAI response: {r.text[:200]}") from exc
		if not isinstance(content, str):
			raise TextGenerationError("Azure OpenAI returned no text content")
		return content

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()


async def load_openai_config(settings: Settings, secrets: SecretSource) -> OpenAIConfig:
	"""Resolve Azure OpenAI settings: environment first, then the secret store.

	Values still missing afterwards stay ``None``; the client then reports
	``configured == False`` and grading uses the deterministic scorer.
	"""
	async def _value(current: Optional[str], name: str) -> Optional[str]:
		if current and current.strip():
			return current.strip()
		value = await lookup_secret(secrets, name)
		return value.strip() if value else None

	return OpenAIConfig(
		endpoint=await _value(settings.azure_openai_endpoint, "AZURE_OPENAI_ENDPOINT"),
		api_key=await _value(settings.azure_openai_api_key, "AZURE_OPENAI_API_KEY"),
		deployment=await _value(settings.azure_openai_deployment, "AZURE_OPENAI_DEPLOYMENT"),
		api_version=settings.azure_openai_api_version,
	)
