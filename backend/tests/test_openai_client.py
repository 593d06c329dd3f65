"""Tests for the Azure OpenAI client and config resolution"""

import json

import httpx
import pytest

from quizbot.openai_client import AzureOpenAIClient, OpenAIConfig, TextGenerationError, load_openai_config
from quizbot.secrets import NullSecretSource, SecretLookupError, StaticSecretSource
from quizbot.settings import Settings

CONFIG = OpenAIConfig(endpoint="https://quiz.openai.azure.com/", api_key="secret", deployment="gpt-grader")


def _client(handler, config=CONFIG):
	http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
	return AzureOpenAIClient(config, client=http), http


class TestAzureOpenAIClient:

	@pytest.mark.asyncio
	async def test_generate_request_and_reply(self):
		seen = {}

		def handler(request: httpx.Request) -> httpx.Response:
			seen["url"] = str(request.url)
			seen["api_key"] = request.headers.get("api-key")
			seen["body"] = json.loads(request.content)
			return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": "{\"score\": 1}"}}]})

		client, http = _client(handler)
		try:
			text = await client.generate("grade this", max_tokens=400, temperature=0.0)
		finally:
			await http.aclose()
		assert text == "{\"score\": 1}"
		assert seen["url"] == (
			"https://quiz.openai.azure.com/openai/deployments/gpt-grader/chat/completions?api-version=2024-06-01"
		)
		assert seen["api_key"] == "secret"
		assert seen["body"] == {
			"messages": [{"role": "user", "content": "grade this"}],
			"max_tokens": 400,
			"temperature": 0.0,
		}

	@pytest.mark.asyncio
	async def test_temperature_omitted_when_none(self):
		bodies = []

		def handler(request):
			bodies.append(json.loads(request.content))
			return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

		client, http = _client(handler)
		await client.generate("p", max_tokens=10)
		await http.aclose()
		assert "temperature" not in bodies[0]

	@pytest.mark.asyncio
	async def test_http_error_raised(self):
		client, http = _client(lambda request: httpx.Response(401, json={"error": "denied"}))
		with pytest.raises(httpx.HTTPStatusError):
			await client.generate("p", max_tokens=10)
		await http.aclose()

	@pytest.mark.asyncio
	async def test_transport_error_raised(self):
		def handler(request):
			raise httpx.ConnectError("refused", request=request)

		client, http = _client(handler)
		with pytest.raises(httpx.RequestError):
			await client.generate("p", max_tokens=10)
		await http.aclose()

	@pytest.mark.asyncio
	async def test_unexpected_body(self):
		client, http = _client(lambda request: httpx.Response(200, json={"output": []}))
		with pytest.raises(TextGenerationError):
			await client.generate("p", max_tokens=10)
		await http.aclose()

	@pytest.mark.asyncio
	async def test_not_configured(self):
		calls = []
		client, http = _client(lambda request: calls.append(request), OpenAIConfig(endpoint="https://x", api_key=""))
		assert not client.configured
		with pytest.raises(TextGenerationError):
			await client.generate("p", max_tokens=10)
		assert calls == []
		await http.aclose()

	@pytest.mark.asyncio
	async def test_aclose_leaves_injected_client_open(self):
		client, http = _client(lambda request: httpx.Response(200))
		await client.aclose()
		assert not http.is_closed
		await http.aclose()


class _BrokenSource:
	async def get(self, name):
		raise SecretLookupError("vault unreachable")


class TestLoadOpenAIConfig:

	@pytest.mark.asyncio
	async def test_settings_win_over_secrets(self):
		settings = Settings(
			_env_file=None,
			AZURE_OPENAI_ENDPOINT="https://env.example",
			AZURE_OPENAI_API_KEY="env-key",
			AZURE_OPENAI_DEPLOYMENT="env-dep",
		)
		secrets = StaticSecretSource({"AZURE_OPENAI_ENDPOINT": "https://vault.example"})
		config = await load_openai_config(settings, secrets)
		assert config.endpoint == "https://env.example"
		assert config.is_complete

	@pytest.mark.asyncio
	async def test_secret_store_fills_gaps(self):
		settings = Settings(_env_file=None, AZURE_OPENAI_ENDPOINT="https://env.example", AZURE_OPENAI_API_KEY="", AZURE_OPENAI_DEPLOYMENT="")
		secrets = StaticSecretSource({"AZURE_OPENAI_API_KEY": "vault-key", "AZURE_OPENAI_DEPLOYMENT": "vault-dep"})
		config = await load_openai_config(settings, secrets)
		assert (config.endpoint, config.api_key, config.deployment) == ("https://env.example", "vault-key", "vault-dep")

	@pytest.mark.asyncio
	async def test_absent_everywhere(self):
		settings = Settings(_env_file=None, AZURE_OPENAI_ENDPOINT="", AZURE_OPENAI_API_KEY="", AZURE_OPENAI_DEPLOYMENT="")
		config = await load_openai_config(settings, NullSecretSource())
		assert not config.is_complete

	@pytest.mark.asyncio
	async def test_secret_failure_treated_as_absent(self, caplog):
		settings = Settings(_env_file=None, AZURE_OPENAI_ENDPOINT="", AZURE_OPENAI_API_KEY="", AZURE_OPENAI_DEPLOYMENT="")
		config = await load_openai_config(settings, _BrokenSource())
		assert config.api_key is None
		assert "vault unreachable" in caplog.text
