"""
Question Paper API — Main Application
FastAPI application for the question bank and paper generator.
Stores questions, assembles question papers from them, and keeps paper templates.
"""

from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from database.database import engine, Base
from database import models  # noqa: F401  (registers tables on Base)
from routers import questions, papers

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(name)s  %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables."""
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="Question Paper API",
    description="Question bank and stratified question paper generation",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Routers ───────────────────────────────────────────────────────────────────

app.include_router(questions.router)          # /api/questions/*
app.include_router(papers.router)             # /api/papers/*


@app.get("/")
def root():
    return {
        "name": "Question Paper API",
        "version": "1.0.0",
        "endpoints": {
            "docs": "/docs",
            "questions": "/api/questions",
            "papers": "/api/papers",
        },
    }


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "question-paper-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
