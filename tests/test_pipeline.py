from __future__ import annotations

import itertools
from typing import Dict, List

import pytest

from plant_crawler.config import CrawlConfig
from plant_crawler.engines.base import CrawlStage
from plant_crawler.engines.pipeline import CrawlPipeline
from plant_crawler.errors import FrontPageError, StorageError
from plant_crawler.models import Houseplant

FRONT = "https://plants.test/"
CAT_A = "https://plants.test/category/a"
CAT_B = "https://plants.test/category/b"


class MemoryStorage:
    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.plants: List[Houseplant] = []

    async def insert(self, plant: Houseplant) -> None:
        if plant.name == self.fail_on:
            raise RuntimeError("disk full")
        self.plants.append(plant)

    def close(self) -> None:
        pass


def plant_url(n: int) -> str:
    return f"https://plants.test/plant-{n}"


def image_url(n: int) -> str:
    return f"https://plants.test/img/{n}.jpg"


def build_site(pages, categories: Dict[str, List[int]], broken: tuple = ()):
    """One listing page per category; plants listed by number."""
    site: Dict[str, str] = {FRONT: pages.front(categories)}
    images: Dict[str, bytes] = {}
    for cat, numbers in categories.items():
        listing = pages.listing([plant_url(n) for n in numbers])
        site[cat] = listing
        site[f"{cat}/page/1"] = listing
        for n in numbers:
            name = None if n in broken else f"Plant {n}"
            site[plant_url(n)] = pages.detail(name=name, image_src=image_url(n))
            images[image_url(n)] = f"img-{n}".encode()
    return site, images


def make_pipeline(fetcher, tmp_path, storage=None, concurrency: int = 3) -> CrawlPipeline:
    cfg = CrawlConfig(start_url=FRONT, concurrency=concurrency, image_dir=str(tmp_path / "images"))
    return CrawlPipeline(cfg, storage, fetcher=fetcher, clock=itertools.count(1).__next__)


@pytest.mark.asyncio
async def test_overlapping_categories_are_deduplicated(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: [1, 2], CAT_B: [2]})
    fetcher = fake_fetcher(site, images)
    storage = MemoryStorage()
    pipeline = make_pipeline(fetcher, tmp_path, storage)

    report = await pipeline.crawl()

    assert sorted(p.name for p in report.records) == ["Plant 1", "Plant 2"]
    assert fetcher.count(plant_url(2)) == 1
    assert report.page_url_count == 3
    assert report.detail_url_count == 2
    assert report.stored_count == 2
    assert sorted(p.name for p in storage.plants) == ["Plant 1", "Plant 2"]
    assert pipeline.stage is CrawlStage.DONE


@pytest.mark.asyncio
async def test_records_carry_archived_images(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: [7]})
    records = await make_pipeline(fake_fetcher(site, images), tmp_path).run()

    assert len(records) == 1
    assert (tmp_path / "images" / records[0].image).read_bytes() == b"img-7"


@pytest.mark.asyncio
async def test_failed_items_are_dropped_not_fatal(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: list(range(10))}, broken=(2, 5, 8))

    report = await make_pipeline(fake_fetcher(site, images), tmp_path).crawl()

    assert len(report.records) == 7
    assert report.failed_count == 3
    assert "Plant 5" not in {p.name for p in report.records}


@pytest.mark.asyncio
async def test_unavailable_category_contributes_nothing(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: [1], CAT_B: [2]})
    del site[CAT_B]

    report = await make_pipeline(fake_fetcher(site, images), tmp_path).crawl()

    assert [p.name for p in report.records] == ["Plant 1"]
    assert report.category_count == 2


@pytest.mark.asyncio
async def test_concurrency_cap_holds_in_every_stage(fake_fetcher, pages, tmp_path) -> None:
    categories = {f"https://plants.test/category/{c}": list(range(c * 10, c * 10 + 6)) for c in range(6)}
    site, images = build_site(pages, categories)
    # Give every category three listing pages so stage B fans out twice.
    for cat, numbers in categories.items():
        site[cat] = pages.listing([], last_page=3)
        site[f"{cat}/page/2"] = pages.listing([plant_url(numbers[0])])
        site[f"{cat}/page/3"] = pages.listing([])
    fetcher = fake_fetcher(site, images)

    report = await make_pipeline(fetcher, tmp_path, concurrency=3).crawl()

    assert len(report.records) == 36
    assert 1 < fetcher.max_in_flight <= 3


@pytest.mark.asyncio
async def test_front_page_failure_is_fatal(fake_fetcher, tmp_path) -> None:
    pipeline = make_pipeline(fake_fetcher(), tmp_path)

    with pytest.raises(FrontPageError):
        await pipeline.crawl()
    assert pipeline.stage is CrawlStage.FAILED


@pytest.mark.asyncio
async def test_storage_failure_aborts_the_run(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: list(range(5))})
    pipeline = make_pipeline(fake_fetcher(site, images), tmp_path, MemoryStorage(fail_on="Plant 3"))

    with pytest.raises(StorageError) as info:
        await pipeline.crawl()
    assert isinstance(info.value.__cause__, RuntimeError)
    assert pipeline.stage is CrawlStage.FAILED


@pytest.mark.asyncio
async def test_no_storage_still_returns_records(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: [1, 2]})

    report = await make_pipeline(fake_fetcher(site, images), tmp_path).crawl()

    assert len(report.records) == 2
    assert report.stored_count == 0


@pytest.mark.asyncio
async def test_front_page_without_categories(fake_fetcher, pages, tmp_path) -> None:
    fetcher = fake_fetcher({FRONT: pages.front([])})

    report = await make_pipeline(fetcher, tmp_path).crawl()

    assert report.records == []
    assert report.summary()["categories"] == 0


@pytest.mark.asyncio
async def test_unresolvable_listing_href_stays_inside_its_category(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: [1], CAT_B: [2]})
    site[f"{CAT_B}/page/1"] = pages.listing(["http://[broken"])

    report = await make_pipeline(fake_fetcher(site, images), tmp_path).crawl()

    assert [p.name for p in report.records] == ["Plant 1"]
    assert report.detail_url_count == 1
    assert report.failed_count == 0


@pytest.mark.asyncio
async def test_unresolvable_category_href_is_dropped(fake_fetcher, pages, tmp_path) -> None:
    site, images = build_site(pages, {CAT_A: [1]})
    site[FRONT] = pages.front([CAT_A, "http://[broken"])

    report = await make_pipeline(fake_fetcher(site, images), tmp_path).crawl()

    assert [p.name for p in report.records] == ["Plant 1"]
    assert report.category_count == 1