"""
Secret lookup for credentials that are not set in the environment.

Sources share one coroutine, ``get(name)``, returning the secret value or
``None`` when the source does not have it. The Key Vault source uses
``DefaultAzureCredential``, so managed identity, environment credentials and
``az login`` all work.
"""

from __future__ import annotations
import logging
import os
from typing import Any, Dict, Mapping, Optional, Protocol

from azure.core.exceptions import AzureError, ClientAuthenticationError, ResourceNotFoundError
from azure.identity.aio import DefaultAzureCredential
from azure.keyvault.secrets.aio import SecretClient

from .settings import Settings


logger = logging.getLogger(__name__)


class SecretLookupError(RuntimeError):
	"""A secret store could not be queried."""


class SecretSource(Protocol):
	async def get(self, name: str) -> Optional[str]: ...


class NullSecretSource:
	async def get(self, name: str) -> Optional[str]:
		return None


class StaticSecretSource:
	def __init__(self, values: Mapping[str, str]) -> None:
		self._values: Dict[str, str] = dict(values)

	async def get(self, name: str) -> Optional[str]:
		return self._values.get(name) or None


class EnvSecretSource:
	def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
		self._environ = os.environ if environ is None else environ

	async def get(self, name: str) -> Optional[str]:
		return self._environ.get(name) or None


def vault_secret_name(name: str) -> str:
	# Key Vault names allow only alphanumerics and dashes
	return name.replace("_", "-")


class KeyVaultSecretSource:
	"""Azure Key Vault secrets through ``SecretClient``.

	A credential failure (no identity available, login expired) is remembered
	for the lifetime of the source: later lookups fail immediately instead of
	walking the credential chain again.
	"""

	def __init__(
		self,
		vault_name: str,
		*,
		client: Optional[Any] = None,
		credential: Optional[Any] = None,
	) -> None:
		if not vault_name:
			raise ValueError("vault_name is required")
		self.vault_url = f"https://{vault_name}.vault.azure.net"
		# Only a credential created here is closed by aclose()
		self._credential = None
		if client is None:
			if credential is None:
				credential = self._credential = DefaultAzureCredential()
			client = SecretClient(vault_url=self.vault_url, credential=credential)
			self._owns_client = True
		else:
			self._owns_client = False
		self._client = client
		self._auth_error: Optional[Exception] = None

	async def get(self, name: str) -> Optional[str]:
		if self._auth_error is not None:
			raise SecretLookupError(f"Key Vault credentials unavailable: {self._auth_error}")
		try:
			secret = await self._client.get_secret(vault_secret_name(name))
		except ResourceNotFoundError:
			return None
		except ClientAuthenticationError as exc:
			self._auth_error = exc
			raise SecretLookupError(f"Key Vault credentials unavailable: {exc}") from exc
		except (AzureError, ValueError, TypeError) as exc:
			raise SecretLookupError(f"Key Vault lookup of {name} failed: {exc}") from exc
		value = getattr(secret, "value", None)
		if value is not None and not isinstance(value, str):
			raise SecretLookupError(f"Key Vault returned a non-text value for {name}")
		return value or None

	async def aclose(self) -> None:
		if not self._owns_client:
			return
		await self._client.close()
		if self._credential is not None:
			await self._credential.close()


def get_secret_source(settings: Settings) -> SecretSource:
	if settings.use_key_vault and settings.key_vault_name:
		return KeyVaultSecretSource(settings.key_vault_name)
	return NullSecretSource()


async def lookup_secret(source: SecretSource, name: str) -> Optional[str]:
	"""``source.get(name)`` with lookup failures logged and treated as absent."""
	try:
		return await source.get(name)
	except SecretLookupError as exc:
		logger.warning("Secret %s unavailable: %s", name, exc)
		return None
