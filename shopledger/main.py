import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shopledger.api.v1.api import api_router
from shopledger.core.config import settings
from shopledger.db.session import close_store, open_store
from shopledger.utils.ledger_validation import (
    InvalidAmount,
    InvalidInput,
    LedgerError,
    NoBalance,
    NotFound,
    NothingToPay,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidAmount: 422,
    InvalidInput: 422,
    NothingToPay: 409,
    NoBalance: 409,
    NotFound: 404,
}


def status_for(exc: LedgerError) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    await open_store()
    yield
    await close_store()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    code = status_for(exc)
    logger.info("%s %s -> %d %s: %s", request.method, request.url.path, code, exc.kind, exc)
    return JSONResponse(
        status_code=code,
        content={"detail": str(exc), "error": exc.kind}
    )


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}


app.include_router(api_router, prefix=settings.API_V1_STR)
