from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Azure OpenAI (model-backed grading). Any value left empty is looked up in the secret store.
	azure_openai_endpoint: str | None = Field(default=None, validation_alias="AZURE_OPENAI_ENDPOINT")
	azure_openai_api_key: str | None = Field(default=None, validation_alias="AZURE_OPENAI_API_KEY")
	azure_openai_deployment: str | None = Field(default=None, validation_alias="AZURE_OPENAI_DEPLOYMENT")
	azure_openai_api_version: str = Field(default="2024-06-01", validation_alias="AZURE_OPENAI_API_VERSION")
	# Generation options for the grading call
	openai_timeout_seconds: float = Field(default=30.0, validation_alias="OPENAI_TIMEOUT_SECONDS")
	openai_max_tokens: int = Field(default=400, validation_alias="OPENAI_MAX_TOKENS")
	openai_temperature: float | None = Field(default=0.0, validation_alias="OPENAI_TEMPERATURE")

	# Key Vault (secrets fallback, managed identity)
	use_key_vault: bool = Field(default=False, validation_alias="USE_KEY_VAULT")
	key_vault_name: str | None = Field(default=None, validation_alias="KEY_VAULT_NAME")

	# Question bank (.json array or .txt question blocks)
	questions_path: str = Field(default="scripts/questions.json", validation_alias="QUESTIONS_PATH")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
	# Stored quiz sessions older than this are purged at startup and daily
	session_retention_days: int = Field(default=7, validation_alias="SESSION_RETENTION_DAYS")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
