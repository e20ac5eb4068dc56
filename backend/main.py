"""
RachaFácil Backend API

A FastAPI backend for group expense splitting and personal budgeting.
This module sets up the app and mounts routers - all endpoint logic is in routers/.
"""

import os
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import models
from database import engine
from utils.errors import ValidationError, SplitMismatchError, ExternalServiceError
from utils.currency import cents_to_decimal_str

# Import routers
from routers import auth, groups, participants, expenses, balances, personal


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create database tables
models.Base.metadata.create_all(bind=engine)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

# Initialize FastAPI app
app = FastAPI(
    title="RachaFácil API",
    description="API for splitting group expenses and tracking personal spending",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    content = {"detail": exc.detail}
    if isinstance(exc, SplitMismatchError):
        content["discrepancy"] = exc.discrepancy
        content["discrepancy_display"] = cents_to_decimal_str(abs(exc.discrepancy))
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(ExternalServiceError)
async def external_service_error_handler(request: Request, exc: ExternalServiceError):
    logger.error(f"External service failure ({exc.service or 'unknown'}) on {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Include routers
app.include_router(auth.router)
app.include_router(groups.router)
app.include_router(participants.router)
app.include_router(expenses.router)
app.include_router(balances.router)
app.include_router(personal.router)
