from __future__ import annotations

import asyncio

from conftest import VEHICLES, RecordingRepository, make_record, make_seed, make_store, scripted_page


def _big_repo(count: int = 30) -> RecordingRepository:
    return RecordingRepository.seeded([f"Site {i:02d}" for i in range(count)])


def test_first_page_replaces_list_and_sets_filter() -> None:
    repo = _big_repo()
    store = make_store(repo, RECORDS_PAGE_SIZE=25)

    asyncio.run(store.fetch_records_paginated())

    state = store.state
    assert len(state.list.records) == 25
    assert state.list.page_info.has_next_page is True
    assert state.list.is_loading is False
    assert state.current_record_type_id is None
    assert repo.calls_to("fetch_records_paginated")[0]["pagination"].limit == 25


def test_load_more_follows_end_cursor_until_last_page() -> None:
    repo = RecordingRepository.seeded([])
    repo.script_page(scripted_page([f"R{i}" for i in range(25)], has_next_page=True, end_cursor="c1"))
    repo.script_page(scripted_page(["Late"], has_next_page=False, end_cursor="c2", start=25))
    store = make_store(repo, RECORDS_PAGE_SIZE=25)

    async def scenario():
        await store.fetch_records_paginated()
        await store.fetch_more_records()
        await store.fetch_more_records()

    asyncio.run(scenario())

    calls = repo.calls_to("fetch_records_paginated")
    assert len(calls) == 2
    more = calls[1]["pagination"]
    assert (more.cursor, more.limit, more.direction) == ("c1", 25, "forward")
    assert len(store.state.list.records) == 26
    assert store.state.list.records[-1].name == "Late"
    assert store.state.list.page_info.has_next_page is False


def test_concurrent_load_more_issues_one_request() -> None:
    repo = _big_repo(60)
    store = make_store(repo, RECORDS_PAGE_SIZE=25)

    async def scenario():
        await store.fetch_records_paginated()
        gate = repo.hold("fetch_records_paginated")
        first = asyncio.ensure_future(store.fetch_more_records())
        second = asyncio.ensure_future(store.fetch_more_records())
        await asyncio.sleep(0)
        assert store.state.list.is_loading_more is True
        gate.set()
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert len(repo.calls_to("fetch_records_paginated")) == 2
    assert len(store.state.list.records) == 50
    assert store.state.list.is_loading_more is False


def test_load_more_without_next_page_is_noop() -> None:
    repo = RecordingRepository.seeded(["Alpha", "Beta"])
    store = make_store(repo)

    async def scenario():
        await store.fetch_records_paginated()
        await store.fetch_more_records()

    asyncio.run(scenario())

    assert len(repo.calls_to("fetch_records_paginated")) == 1
    assert [r.name for r in store.state.list.records] == ["Alpha", "Beta"]


def test_first_page_error_leaves_empty_list() -> None:
    repo = _big_repo()
    repo.fail_next("fetch_records_paginated", "network down")
    store = make_store(repo)

    asyncio.run(store.fetch_records_paginated())

    assert store.state.list.error == "network down"
    assert store.state.list.records == ()
    assert store.state.list.is_loading is False


def test_load_more_error_keeps_loaded_records_and_cursor() -> None:
    repo = _big_repo()
    store = make_store(repo, RECORDS_PAGE_SIZE=25)

    async def scenario():
        await store.fetch_records_paginated()
        cursor = store.state.list.page_info.end_cursor
        repo.fail_next("fetch_records_paginated", "timeout")
        await store.fetch_more_records()
        return cursor

    cursor = asyncio.run(scenario())

    state = store.state.list
    assert len(state.records) == 25
    assert state.error == "timeout"
    assert state.is_loading_more is False
    assert state.page_info.end_cursor == cursor
    assert state.page_info.has_next_page is True


def test_superseded_first_page_is_dropped() -> None:
    seed = make_seed(["Harbour", "Depot"])
    seed.records.append(make_record(9, "Van", record_type=VEHICLES))
    repo = RecordingRepository.from_seed(seed)
    store = make_store(repo)

    async def scenario():
        gate = repo.hold("fetch_records_paginated")
        slow = asyncio.ensure_future(store.fetch_records_paginated())
        await asyncio.sleep(0)
        await store.fetch_records_paginated(VEHICLES.id)
        gate.set()
        await slow

    asyncio.run(scenario())

    assert store.state.current_record_type_id == VEHICLES.id
    assert [r.name for r in store.state.list.records] == ["Van"]


def test_load_more_started_before_reset_is_dropped() -> None:
    repo = _big_repo()
    store = make_store(repo, RECORDS_PAGE_SIZE=25)

    async def scenario():
        await store.fetch_records_paginated()
        gate = repo.hold("fetch_records_paginated")
        more = asyncio.ensure_future(store.fetch_more_records())
        await asyncio.sleep(0)
        await store.fetch_records_paginated()
        gate.set()
        await more

    asyncio.run(scenario())

    assert len(store.state.list.records) == 25
    assert store.state.list.is_loading_more is False


def test_cancelled_fetch_clears_loading_flag() -> None:
    repo = _big_repo()
    store = make_store(repo)

    async def scenario():
        repo.hold("fetch_records_paginated")
        task = asyncio.ensure_future(store.fetch_records_paginated())
        await asyncio.sleep(0)
        assert store.state.list.is_loading is True
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    asyncio.run(scenario())

    assert store.state.list.is_loading is False


def test_filter_is_stored_without_fetching() -> None:
    repo = _big_repo()
    store = make_store(repo)

    store.set_current_record_type_filter(VEHICLES.id)

    assert store.state.current_record_type_id == VEHICLES.id
    assert repo.calls == []


def test_refresh_reuses_active_filter() -> None:
    seed = make_seed(["Harbour"])
    seed.records.append(make_record(9, "Van", record_type=VEHICLES))
    repo = RecordingRepository.from_seed(seed)
    store = make_store(repo)

    async def scenario():
        await store.fetch_records_paginated(VEHICLES.id)
        await store.refresh_records()

    asyncio.run(scenario())

    calls = repo.calls_to("fetch_records_paginated")
    assert [c["record_type_id"] for c in calls] == [VEHICLES.id, VEHICLES.id]
    assert [r.name for r in store.state.list.records] == ["Van"]
