from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
import os
import json

from .version import __version__, CONFIG_SCHEMA_VERSION

DEFAULT_START_URL = "https://komnatnie-rastenija.ru/"
PAGINATION_STRATEGIES = ("offset", "max-numeric")


@dataclass
class CrawlConfig:
    """
    Canonical configuration object passed throughout the system.
    Built once before a run; the pipeline never mutates it.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    start_url: str = DEFAULT_START_URL
    concurrency: int = 5
    image_dir: str = "./images"
    request_timeout: float = 15.0
    retries: int = 0
    user_agent: str = f"plant_crawler/{__version__}"
    # "offset" reads the third-from-last navigation child, "max-numeric" the largest number.
    pagination: str = "offset"
    # None disables persistence; otherwise a backend name or a "module:Class" dotted path.
    storage: Optional[str] = None
    storage_path: str = "output/houseplants.jsonl"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """
        Build config from PLANT_CRAWLER_* environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(f"PLANT_CRAWLER_{name}", default)

        return cls(
            start_url=_get("START_URL", DEFAULT_START_URL),
            concurrency=int(_get("CONCURRENCY", "5")),
            image_dir=_get("IMAGE_DIR", "./images"),
            request_timeout=float(_get("REQUEST_TIMEOUT", "15.0")),
            retries=int(_get("RETRIES", "0")),
            user_agent=_get("USER_AGENT", f"plant_crawler/{__version__}"),
            pagination=_get("PAGINATION", "offset"),
            storage=_get("STORAGE", "") or None,
            storage_path=_get("STORAGE_PATH", "output/houseplants.jsonl"),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "CrawlConfig":
        """
        Load configuration from a JSON file. Older schema versions are migrated first.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if not self.start_url:
            raise ValueError("start_url cannot be empty")
        if self.concurrency <= 0:
            raise ValueError("concurrency must be > 0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        if self.pagination not in PAGINATION_STRATEGIES:
            raise ValueError(
                f"pagination must be one of {', '.join(PAGINATION_STRATEGIES)}, got {self.pagination!r}"
            )


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive.
    """
    data = dict(raw)
    schema = data.get("schema_version", 1)

    if schema < 2:
        # v1 used concurrent_tasks and database.
        if "concurrent_tasks" in data:
            data["concurrency"] = data.pop("concurrent_tasks")
        if "database" in data:
            data["storage"] = data.pop("database")

    data["schema_version"] = CONFIG_SCHEMA_VERSION
    return data
