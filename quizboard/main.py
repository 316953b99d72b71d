import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from quizboard.api.routes import router
from quizboard.bank.startup import init_bank_for_app

app = FastAPI(title="quizboard", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    init_bank_for_app()
    logger.info("quizboard ready")


@app.get("/")
async def _root() -> RedirectResponse:
    return RedirectResponse(url="/game")


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "quizboard", "version": "0.1.0"}
