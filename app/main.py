# app/main.py

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import os
import logging

from app.api.task import router as task_router
from app.api.user import router as user_router

from app.core.settings import settings
from app.core.exceptions import BaseAppException, TransactionAborted
from app.database import init_db

# Логирование
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("Taskboard.API")

app = FastAPI(
    title="Taskboard API",
    version="1.0.0",
    description="Tasks and users with consistent assignments",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(task_router)
app.include_router(user_router)

# Health check & root
@app.get("/", tags=["Health"])
def root():
    return {"status": "Taskboard API is running!"}

@app.get("/health", tags=["Health"])
def health():
    return {"ok": True}

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting Taskboard API ({settings.ENV})")
    init_db()

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Stopping Taskboard API")

@app.exception_handler(TransactionAborted)
async def transaction_aborted_handler(request: Request, exc: TransactionAborted):
    logger.error(f"{request.method} {request.url.path}: transaction aborted: {exc.cause!r}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "data": str(exc.cause) if exc.cause else None},
    )

@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "data": jsonable_encoder(getattr(exc, "detail", None))},
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Missing required fields", "data": jsonable_encoder(exc.errors())},
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=settings.DEBUG,
    )
