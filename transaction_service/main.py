import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from transaction_service.api.routes import api_router
from transaction_service.clients import HttpAccountGateway
from transaction_service.config import settings
from transaction_service.database import AsyncSessionLocal, Base, engine
from transaction_service.errors import TransactionError
from transaction_service.logging_config import configure_logging
from transaction_service.repositories import SqlTransactionJournal
from transaction_service.services import TransactionService

logger = logging.getLogger(__name__)


async def _init_db():
    """Retry DB connection and create tables. Runs in background so the app can bind its port."""
    for attempt in range(30):
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database initialized successfully")
            return
        except Exception as e:
            wait = min(2**attempt, 30)
            logger.warning("DB init failed (attempt %d/30), retrying in %ds: %s", attempt + 1, wait, e)
            await asyncio.sleep(wait)
    logger.error("Database initialization failed after 30 attempts")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    init_task = asyncio.create_task(_init_db())
    gateway = HttpAccountGateway.create(settings.account_service_url, settings.account_service_timeout)
    service = TransactionService(gateway, SqlTransactionJournal(AsyncSessionLocal))
    app.state.transaction_service = service
    logger.info("Account service at %s", settings.account_service_url)
    yield
    init_task.cancel()
    await service.notifier.drain()
    await gateway.aclose()
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Deposits, withdrawals, credit payments, card consumptions and compensated transfers "
    "against an external account service, with a local append-only journal.",
    lifespan=lifespan,
)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(TransactionError)
async def transaction_error_handler(request: Request, exc: TransactionError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": exc.status_code,
            "error": exc.title,
            "kind": exc.kind.value,
            "message": exc.message,
            "path": request.url.path,
        },
    )


@app.get("/health")
def health():
    return {"status": "ok"}
