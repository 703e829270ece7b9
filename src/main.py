"""
News Check Service - heuristic fake news scoring API
Exposes the detector and the recent-analysis history over HTTP.
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Tuple
from collections import Counter
import asyncio
import logging
import os
import time
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from newscheck.config import get_settings
from newscheck.detector import NewsDetector, build_detector
from newscheck.history import HistoryStore
from newscheck.models import AnalysisResult


# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('logs/newscheck.log') if os.path.exists('logs') else logging.NullHandler()
    ]
)

logger = logging.getLogger(__name__)

# Load environment variables early so Settings picks them up
load_dotenv()


# Service configuration
class Config:
    """Service metadata"""

    VERSION = "1.0.0"
    TITLE = "News Check Service"
    DESCRIPTION = "Heuristic fake news scoring with optional fact-check lookup"
    MAX_TEXT_LENGTH = 10000

    @classmethod
    def validate(cls):
        """Log current configuration"""
        settings = get_settings()
        logger.info("Configuration loaded:")
        logger.info(f"  Fact check configured: {bool(settings.fact_check_api_key)}")
        logger.info(f"  Score jitter: +/-{settings.score_jitter}")
        logger.info(f"  History: limit={settings.history_limit} path={settings.history_path or 'memory'}")


config = Config()


# Metrics tracker
class Metrics:
    """Track service metrics"""

    def __init__(self):
        self.total_analyses = 0
        self.verdicts = Counter()
        self.total_processing_time = 0.0
        self.start_time = time.time()

    def record_analysis(self, verdict: str, processing_time: float):
        """Record analysis outcome"""
        self.total_analyses += 1
        self.verdicts[verdict] += 1
        self.total_processing_time += processing_time

    def get_stats(self) -> Dict[str, Any]:
        """Get current metrics"""
        uptime = time.time() - self.start_time
        avg_time = self.total_processing_time / self.total_analyses if self.total_analyses > 0 else 0

        return {
            "total_analyses": self.total_analyses,
            "verdicts": dict(self.verdicts),
            "average_processing_time": f"{avg_time:.3f}s",
            "uptime_seconds": int(uptime)
        }


metrics = Metrics()
detector: Optional[NewsDetector] = None
history: Optional[HistoryStore] = None


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    global detector, history
    logger.info("=" * 60)
    logger.info(f"Starting {config.TITLE} v{config.VERSION}")
    logger.info("=" * 60)

    config.validate()
    settings = get_settings()
    detector = build_detector(settings)
    history = HistoryStore(limit=settings.history_limit, path=settings.history_path)
    history.load()
    app.state.detector = detector
    app.state.history = history

    logger.info("Service ready")

    yield

    logger.info("Shutting down...")
    history.save()
    logger.info("Shutdown complete")


# FastAPI application
app = FastAPI(
    title=config.TITLE,
    version=config.VERSION,
    description=config.DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc) if get_settings().debug else "An error occurred"
        }
    )


# Request models
class AnalyzeRequest(BaseModel):
    """Analysis request model"""

    text: str = Field("", max_length=Config.MAX_TEXT_LENGTH, description="Content to analyze")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint with service information"""
    return {
        "service": config.TITLE,
        "version": config.VERSION,
        "status": "operational",
        "endpoints": {
            "analyze": "POST /analyze",
            "history": "GET /history",
            "history_item": "GET /history/{result_id}",
            "clear_history": "DELETE /history",
            "health": "GET /health",
            "metrics": "GET /metrics"
        }
    }


@app.get("/health")
async def health_check():
    """Component health"""
    fact_check_ready = bool(detector and detector.fact_checker and detector.fact_checker.is_available())
    return {
        "status": "healthy" if detector else "starting",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "api": "healthy",
            "detector": "loaded" if detector else "unavailable",
            "fact_check": "configured" if fact_check_ready else "disabled",
            "history": "file" if get_settings().history_path else "memory"
        }
    }


@app.get("/metrics")
async def get_metrics():
    """Get service metrics"""
    return {
        "service": config.TITLE,
        "version": config.VERSION,
        "metrics": metrics.get_stats(),
        "history_items": len(history) if history else 0
    }


def _require_ready() -> Tuple[NewsDetector, HistoryStore]:
    if detector is None or history is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up"
        )
    return detector, history


@app.post("/analyze", response_model=AnalysisResult)
async def analyze(request_body: AnalyzeRequest):
    """Score a text snippet and store the result in history"""
    active_detector, store = _require_ready()
    start = time.time()

    logger.info(f"New analysis: {request_body.text[:50]!r}")
    result = await active_detector.analyze(request_body.text)
    await asyncio.to_thread(store.add, result)

    metrics.record_analysis(result.verdict, time.time() - start)
    return result


@app.get("/history", response_model=List[AnalysisResult])
async def get_history():
    """Most recent analyses, newest first"""
    _, store = _require_ready()
    return store.items()


@app.get("/history/{result_id}", response_model=AnalysisResult)
async def get_history_item(result_id: str):
    """Get a stored analysis by id"""
    _, store = _require_ready()
    result = store.get(result_id)

    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Result not found in history"
        )

    return result


@app.delete("/history")
async def clear_history():
    """Delete all stored analyses"""
    _, store = _require_ready()
    store.clear()
    logger.info("History cleared")

    return {"message": "History cleared successfully"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
        log_level="info"
    )
