from __future__ import annotations

from typing import Any, Dict, Optional
import logging

try:
    from fastapi import FastAPI, HTTPException
    from pydantic import BaseModel, Field
except ImportError as exc:  # pragma: no cover - optional dependency
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install 'plant-crawler[api]'` "
        "or avoid using the API server."
    ) from exc

from ..config import CrawlConfig
from ..engines.base import CrawlReport
from ..engines.pipeline import CrawlPipeline
from ..errors import CrawlerError
from ..storage import create_storage
from ..version import __version__

logger = logging.getLogger(__name__)

app = FastAPI(title="plant_crawler API", version=__version__)


class CrawlRequest(BaseModel):
    start_url: Optional[str] = None
    concurrency: Optional[int] = Field(default=None, gt=0)
    image_dir: Optional[str] = None
    pagination: Optional[str] = None
    storage: Optional[str] = None
    storage_path: Optional[str] = None


def build_pipeline(cfg: CrawlConfig) -> CrawlPipeline:
    # Swapped out in tests.
    return CrawlPipeline(cfg, create_storage(cfg.storage, cfg.storage_path))


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok", "version": __version__}


@app.post("/crawl")
async def crawl(req: CrawlRequest) -> Dict[str, Any]:
    cfg = CrawlConfig.from_env()
    if req.start_url:
        cfg.start_url = req.start_url
    if req.concurrency is not None:
        cfg.concurrency = req.concurrency
    if req.image_dir:
        cfg.image_dir = req.image_dir
    if req.pagination:
        cfg.pagination = req.pagination
    if req.storage:
        cfg.storage = req.storage
    if req.storage_path:
        cfg.storage_path = req.storage_path

    try:
        cfg.validate()
        pipeline = build_pipeline(cfg)
    except (ValueError, ImportError, AttributeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        report: CrawlReport = await pipeline.crawl()
    except CrawlerError as exc:
        logger.warning("Crawl failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    finally:
        if pipeline.storage is not None:
            pipeline.storage.close()

    return {**report.summary(), "plants": [plant.to_dict() for plant in report.records]}
