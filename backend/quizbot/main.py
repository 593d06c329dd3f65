import asyncio
import logging

from fastapi import FastAPI

from .db import get_db, init_db
from .cleanup import purge_older_than
from .settings import settings
from .routers import quiz

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Speech Quiz API")
app.include_router(quiz.router)


@app.get("/info")
def root():
	configured = bool(settings.azure_openai_endpoint and settings.azure_openai_api_key and settings.azure_openai_deployment)
	return {
		"status": "ok",
		"openai_configured": configured,
		"key_vault_enabled": bool(settings.use_key_vault and settings.key_vault_name),
	}


def _purge_sessions() -> None:
	db = next(get_db())
	try:
		removed = purge_older_than(db, settings.session_retention_days)
		if removed:
			logger.info("Purged %d stored quiz results", removed)
	except Exception:
		logger.exception("Quiz session purge failed")
	finally:
		db.close()


async def _cleanup_watcher():
	# Startup already purged once; then daily
	while True:
		await asyncio.sleep(24 * 60 * 60)
		_purge_sessions()


@app.on_event("startup")
async def startup_event():
	init_db()
	_purge_sessions()
	asyncio.create_task(_cleanup_watcher())
