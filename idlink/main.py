import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from idlink import settings
from idlink.database.config.db import engine, Base
from idlink.routers import api_router
from idlink.utils.errors import IDLinkError
from idlink.utils.smtp import Mailer

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tables are owned by alembic; this only fills in a fresh development database
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="IDLink", lifespan=lifespan)
app.state.mailer = Mailer.from_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IDLinkError)
async def idlink_error_handler(request: Request, exc: IDLinkError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Missing required fields", "errors": _describe(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Missing required fields", "errors": _describe(exc.errors())},
    )


def _describe(errors) -> list:
    return [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "error": error.get("msg")}
        for error in errors
    ]


@app.get("/", response_class=PlainTextResponse)
def root():
    return "IDLink Backend is Running"


# Include the API router
app.include_router(api_router)

for directory in (settings.UPLOAD_DIR, settings.MAIL_PREVIEW_DIR):
    os.makedirs(directory, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
app.mount("/previews", StaticFiles(directory=settings.MAIL_PREVIEW_DIR), name="previews")
