"""
Document summarizer application.

Run with:
    uvicorn main:app --port 3000
"""
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from config import PORT
from logs import setup_llm_logging
from summarization import router as summarization_router
from summarization.llm_client import close_session

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = setup_llm_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"[APP] Server starting | port={PORT}")
    yield
    await close_session()
    logger.info("[APP] Server stopped")


app = FastAPI(title="Document Summarizer", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(summarization_router)


@app.get("/health", response_class=PlainTextResponse)
async def health():
    return "ok"


@app.get("/", include_in_schema=False)
async def index():
    return FileResponse(STATIC_DIR / "index.html")


app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
