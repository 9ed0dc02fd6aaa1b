from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from ..config import CrawlConfig, PAGINATION_STRATEGIES
from ..engines.base import CrawlReport
from ..engines.pipeline import CrawlPipeline
from ..errors import CrawlerError
from ..storage import create_storage
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Houseplant catalog crawler")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--start-url", type=str, default=None, help="Front page URL (default from config)")
    p.add_argument("--concurrency", type=int, default=None, help="Concurrent fetches (default from config)")
    p.add_argument("--image-dir", type=str, default=None, help="Directory for downloaded images")
    p.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    p.add_argument("--retries", type=int, default=None, help="Extra attempts per failed request")
    p.add_argument("--pagination", choices=PAGINATION_STRATEGIES, default=None,
                   help="How to read the page count from the pagination bar")
    p.add_argument("--storage", type=str, default=None,
                   help="Storage backend: jsonl, csv, sqlite or module:Class (default: none)")
    p.add_argument("--storage-path", type=str, default=None, help="File the storage backend writes to")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    p.add_argument("--serve", action="store_true", help="Run REST API server instead of CLI crawl")
    p.add_argument("--host", type=str, default="127.0.0.1", help="API host (when --serve)")
    p.add_argument("--port", type=int, default=8000, help="API port (when --serve)")
    return p


def _load_config(args: argparse.Namespace) -> CrawlConfig:
    if args.config:
        cfg = CrawlConfig.from_file(args.config)
    else:
        cfg = CrawlConfig.from_env()

    if args.start_url:
        cfg.start_url = args.start_url
    if args.concurrency is not None:
        cfg.concurrency = args.concurrency
    if args.image_dir:
        cfg.image_dir = args.image_dir
    if args.timeout is not None:
        cfg.request_timeout = args.timeout
    if args.retries is not None:
        cfg.retries = args.retries
    if args.pagination:
        cfg.pagination = args.pagination
    if args.storage:
        cfg.storage = args.storage
    if args.storage_path:
        cfg.storage_path = args.storage_path

    cfg.validate()
    return cfg


def run_server(host: str, port: int) -> None:
    try:
        import uvicorn  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dep
        raise SystemExit("To run the API, install the api extra: pip install 'plant-crawler[api]'") from exc
    uvicorn.run("plant_crawler.apis.app:app", host=host, port=port)


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.serve:
        run_server(args.host, args.port)
        return 0

    try:
        cfg = _load_config(args)
        storage = create_storage(cfg.storage, cfg.storage_path)
    except (OSError, ValueError, TypeError, ImportError, AttributeError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    pipeline = CrawlPipeline(cfg, storage)
    try:
        report: CrawlReport = asyncio.run(pipeline.crawl())
    except CrawlerError as exc:
        logger.error("Crawl aborted: %s", exc)
        return 1
    finally:
        if storage is not None:
            storage.close()

    logger.info("Done: %s | Images: %s%s", report.summary(), cfg.image_dir,
                f" | Stored in: {cfg.storage_path}" if storage is not None else "")
    return 0
