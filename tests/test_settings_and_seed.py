from __future__ import annotations

import asyncio

import pytest
import structlog
from pydantic import ValidationError

from recordsync.config import SeedLoader, Settings, get_available_seeds, load_seed, load_seed_file
from recordsync.exceptions import SeedFileError
from recordsync.repository import InMemoryRecordRepository
from recordsync.store import create_records_store
from recordsync.utils import configure_logging


def test_defaults() -> None:
    config = Settings()

    assert config.RECORDS_PAGE_SIZE == 25
    assert config.RECORDS_SEARCH_LIMIT == 10
    assert config.RECORD_REPORTS_SUMMARY_LIMIT == 20
    assert config.DETAIL_CACHE_MAX_ENTRIES is None


def test_page_size_is_clamped() -> None:
    assert Settings(RECORDS_PAGE_SIZE=500).RECORDS_PAGE_SIZE == 100
    assert Settings(RECORDS_PAGE_SIZE=0).RECORDS_PAGE_SIZE == 1


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("RECORDS_PAGE_SIZE", "40")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = Settings()

    assert config.RECORDS_PAGE_SIZE == 40
    assert config.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize("field,value", [
    ("RECORDS_SEARCH_LIMIT", 0),
    ("DETAIL_CACHE_MAX_ENTRIES", 0),
    ("LOG_LEVEL", "verbose"),
    ("RECORDS_SEARCH_MIN_QUERY_LENGTH", 1),
])
def test_invalid_values_are_rejected(field, value) -> None:
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_demo_seed_loads() -> None:
    seed = load_seed("demo_portfolio")

    assert "demo_portfolio" in get_available_seeds()
    assert [rt.id for rt in seed.record_types] == ["rt-sites", "rt-vehicles"]
    assert {r.id for r in seed.records} >= {"rec-harbour", "rec-van"}


def test_demo_seed_backs_a_repository() -> None:
    repo = InMemoryRecordRepository.from_seed(load_seed("demo_portfolio"))

    async def scenario():
        templates = await repo.fetch_record_templates("rec-harbour")
        reports = await repo.fetch_record_reports_summary("rec-harbour")
        return templates, reports

    templates, reports = asyncio.run(scenario())

    assert "tpl-draft" not in [t.id for t in templates.data]
    assert [r.id for r in reports.data] == ["rep-2", "rep-1"]


def test_unknown_seed_name_lists_available(tmp_path) -> None:
    (tmp_path / "other.yaml").write_text("records: []\n")

    with pytest.raises(SeedFileError, match="other"):
        SeedLoader(tmp_path).load("missing")


def test_invalid_yaml_raises(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("records: [unclosed\n")

    with pytest.raises(SeedFileError, match="Invalid YAML"):
        load_seed_file(path)


def test_dangling_record_type_is_rejected(tmp_path) -> None:
    path = tmp_path / "dangling.yaml"
    path.write_text(
        "records:\n"
        "  - id: rec-1\n"
        "    name: Orphan\n"
        "    record_type_id: rt-nowhere\n"
    )

    with pytest.raises(SeedFileError, match="rt-nowhere"):
        load_seed_file(path)


@pytest.mark.parametrize("section,entry", [
    ("record_types", "  - {id: rt-sites, name: Sites, name_singular: Site}\n"),
    ("templates", "  - {id: tpl-1, name: Fire Safety Check}\n"),
    ("reports", "  - {id: rep-1, template_name: Fire Safety Check}\n"),
    ("records", "  - {id: rec-1, name: Harbour}\n"),
])
def test_duplicate_ids_are_rejected(tmp_path, section, entry) -> None:
    path = tmp_path / "duplicates.yaml"
    path.write_text(f"{section}:\n{entry}{entry}")

    with pytest.raises(SeedFileError, match="Duplicate"):
        load_seed_file(path)


def test_unknown_top_level_key_is_rejected(tmp_path) -> None:
    path = tmp_path / "extra.yaml"
    path.write_text("sites: []\n")

    with pytest.raises(SeedFileError):
        load_seed_file(path)


def test_create_records_store_uses_seed_file() -> None:
    seed_path = SeedLoader().seed_dir / "demo_portfolio.yaml"
    store = create_records_store(settings=Settings(SEED_FILE=seed_path))

    asyncio.run(store.fetch_records_paginated())

    assert len(store.state.list.records) == 4


def test_create_records_store_starts_empty_without_seed() -> None:
    store = create_records_store(settings=Settings(SEED_FILE=None))

    asyncio.run(store.fetch_records())

    assert store.state.records == ()


def test_logging_respects_level(capsys) -> None:
    configure_logging(Settings(LOG_LEVEL="WARNING", LOG_JSON=True), force=True)
    logger = structlog.get_logger("recordsync.test")

    logger.info("hidden event")
    logger.warning("visible event", record_id="rec-1")

    out = capsys.readouterr().out
    assert "hidden event" not in out
    assert '"record_id": "rec-1"' in out
    structlog.reset_defaults()
