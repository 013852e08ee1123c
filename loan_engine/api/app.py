"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from loan_engine.api.routes import calculations
from loan_engine.config import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="Loan Engine",
    description="Amortization schedules with rate changes, overpayments and fees",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculations.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
