"""Unit tests for CollectionStore.

Tests cover:
- fetch: wholesale replacement, totals, stale-but-present data on failure
- issue-order guard: an older response never overwrites a newer query
- query commands: merge/reset/page/page size trigger a fetch
- create/update/delete/get reconciliation and NotFound pruning
- debounced search and teardown
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from lodge_admin.application.services.collection_store import CollectionStore
from lodge_admin.application.services.statistics import (
    MemberStatistics,
    member_statistics,
)
from lodge_admin.domain.errors import (
    ConflictError,
    NotFoundError,
    TransientNetworkError,
    ValidationError,
)
from lodge_admin.domain.models.collection import CollectionStatus
from lodge_admin.domain.models.filter_spec import MEMBER_FILTERS
from lodge_admin.domain.models.records import Member
from lodge_admin.domain.models.result import ErrorKind
from lodge_admin.infrastructure.stubs import ResourceApiStub
from tests.helpers import make_member

MemberStore = CollectionStore[Member, MemberStatistics]


def _store(api: ResourceApiStub, page_size: int = 10, delay: float = 0.02) -> MemberStore:
    return CollectionStore(
        api,
        MEMBER_FILTERS,
        Member.from_dict,
        member_statistics,
        page_size=page_size,
        search_delay_seconds=delay,
    )


@pytest.fixture
def store(resource_api: ResourceApiStub) -> MemberStore:
    return _store(resource_api)


def _ids(store: MemberStore) -> list[str]:
    return [m.id for m in store.records]


class TestFetch:
    @pytest.mark.asyncio
    async def test_fetch_replaces_records_and_totals(self, store: MemberStore) -> None:
        """A fetch replaces the records and the pagination totals."""
        result = await store.fetch()

        assert result.ok
        assert len(store.records) == 10
        assert store.records[0].id == "m25"
        assert store.pagination.total_items == 25
        assert store.pagination.total_pages == 3
        assert store.status == CollectionStatus.IDLE

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_records(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """A failed fetch keeps the previous records and records the error."""
        await store.fetch()
        held = store.records
        resource_api.fail_next("list_page", TransientNetworkError("Request timeout after 30s"))

        result = await store.fetch()

        assert result.error_kind == ErrorKind.TRANSIENT_NETWORK
        assert store.records is held
        assert store.status == CollectionStatus.ERROR
        assert store.error_message == "Request timeout after 30s"

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """A successful fetch clears an earlier error."""
        resource_api.fail_next("list_page", TransientNetworkError("down"))
        await store.fetch()

        await store.fetch()

        assert store.error_message is None
        assert store.error_kind is None
        assert store.status == CollectionStatus.IDLE

    @pytest.mark.asyncio
    async def test_fetch_sends_only_active_filters(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """Only filters that differ from their defaults reach the server."""
        await store.merge_filters({"grade": "master"})

        assert resource_api.calls[-1] == (
            "list_page",
            "members",
            {"grade": "master", "page": "1", "limit": "10"},
        )


class TestIssueOrder:
    @pytest.mark.asyncio
    async def test_late_older_response_is_discarded(self) -> None:
        """An older response arriving after a newer one is discarded as superseded."""
        api = ResourceApiStub(
            {
                "members": [
                    make_member("x1", firstNames="Xavier"),
                    make_member("y1", firstNames="Yusuf"),
                ]
            }
        )
        store = _store(api)
        gate = api.hold_next_list()

        first = asyncio.create_task(store.merge_filters({"search": "xavier"}))
        await asyncio.sleep(0)
        second = await store.merge_filters({"search": "yusuf"})
        gate.set()
        first_result = await first

        assert second.ok
        assert first_result.error_kind == ErrorKind.SUPERSEDED
        assert _ids(store) == ["y1"]
        assert store.status == CollectionStatus.IDLE

    @pytest.mark.asyncio
    async def test_superseded_failure_does_not_set_error(self) -> None:
        """A superseded failure never sets the error state."""
        api = ResourceApiStub({"members": [make_member("m1")]})
        store = _store(api)
        gate = api.hold_next_list()

        first = asyncio.create_task(store.fetch())
        await asyncio.sleep(0)
        await store.fetch()
        gate.set()
        await first

        assert store.error_message is None
        assert _ids(store) == ["m1"]


class TestQueryCommands:
    @pytest.mark.asyncio
    async def test_merge_filters_rejects_unknown_key(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """An unknown filter key fails with INVALID_INPUT and sends no request."""
        result = await store.merge_filters({"lodge": "7"})

        assert result.error_kind == ErrorKind.INVALID_INPUT
        assert resource_api.calls == []
        assert store.error_message is None

    @pytest.mark.asyncio
    async def test_merge_filters_rejects_unhashable_value(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """A list filter value fails with INVALID_INPUT and leaves filters and records alone."""
        await store.fetch()
        filters_before = dict(store.filters)
        records_before = store.records
        calls_before = len(resource_api.calls)

        result = await store.merge_filters({"grade": ["master"]})

        assert not result.ok
        assert result.error_kind == ErrorKind.INVALID_INPUT
        assert dict(store.filters) == filters_before
        assert store.records is records_before
        assert len(resource_api.calls) == calls_before

    @pytest.mark.asyncio
    async def test_set_page_fetches_that_page(self, store: MemberStore) -> None:
        """set_page fetches the requested page."""
        await store.fetch()

        await store.set_page(3)

        assert store.pagination.page == 3
        assert _ids(store) == [f"m{i:02d}" for i in range(5, 0, -1)]

    @pytest.mark.asyncio
    async def test_set_page_size(self, store: MemberStore) -> None:
        """Changing the page size returns to page one and refetches."""
        await store.fetch()
        await store.set_page(2)

        result = await store.set_page_size(50)

        assert result.ok
        assert store.pagination.page == 1
        assert len(store.records) == 25

    @pytest.mark.asyncio
    async def test_set_page_size_rejects_unknown_option(self, store: MemberStore) -> None:
        """An unknown page size fails with INVALID_INPUT."""
        result = await store.set_page_size(30)
        assert result.error_kind == ErrorKind.INVALID_INPUT

    @pytest.mark.asyncio
    async def test_reset_filters(self, store: MemberStore) -> None:
        """Resetting filters clears them and refetches."""
        await store.merge_filters({"grade": "master", "search": "x"})
        assert store.has_active_filters

        await store.reset_filters()

        assert not store.has_active_filters
        assert len(store.records) == 10


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_prepends_and_keeps_page_size(self, store: MemberStore) -> None:
        """A created record goes first and the page keeps its size."""
        await store.fetch()

        payload = make_member("draft", firstNames="New")
        del payload["id"]

        result = await store.create(payload)

        assert result.ok
        assert store.records[0].first_names == "New"
        assert len(store.records) == 10
        assert store.records[1].id == "m25"

    @pytest.mark.asyncio
    async def test_create_validation_error_leaves_records(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """A validation failure keeps records and exposes the field errors."""
        await store.fetch()
        held = store.records
        resource_api.fail_next(
            "create",
            ValidationError("Datos inválidos", field_errors={"email": ["Email inválido"]}),
        )

        result = await store.create({"firstNames": "Bad"})

        assert result.error_kind == ErrorKind.VALIDATION
        assert result.field_errors == {"email": ["Email inválido"]}
        assert store.records is held
        assert store.field_errors == {"email": ["Email inválido"]}

    @pytest.mark.asyncio
    async def test_update_replaces_in_place(self, store: MemberStore) -> None:
        """An updated record replaces the old one in place."""
        await store.fetch()

        result = await store.update("m24", {"grade": "master"})

        assert result.ok
        assert _ids(store)[1] == "m24"
        assert store.records[1].grade == "master"

    @pytest.mark.asyncio
    async def test_update_off_page_still_succeeds(self, store: MemberStore) -> None:
        """Updating a record not on the page succeeds without touching the page."""
        await store.fetch()
        held = store.records

        result = await store.update("m01", {"grade": "master"})

        assert result.ok
        assert store.records is held

    @pytest.mark.asyncio
    async def test_update_refreshes_selected(self, store: MemberStore) -> None:
        """Updating the selected record refreshes the selection."""
        await store.get("m24")

        await store.update("m24", {"position": "Treasurer"})

        assert store.selected is not None
        assert store.selected.position == "Treasurer"

    @pytest.mark.asyncio
    async def test_conflict_is_surfaced(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """A conflict is surfaced as CONFLICT with its message."""
        resource_api.fail_next("update", ConflictError("Recurso duplicado"))

        result = await store.update("m24", {"email": "dup@x"})

        assert result.error_kind == ErrorKind.CONFLICT
        assert store.error_message == "Recurso duplicado"

    @pytest.mark.asyncio
    async def test_delete_removes_record_but_not_total(self, store: MemberStore) -> None:
        """Deleting removes the record and clears the selection but keeps the total."""
        await store.fetch()
        await store.get("m25")

        result = await store.delete("m25")

        assert result.ok
        assert "m25" not in _ids(store)
        assert store.pagination.total_items == 25
        assert store.selected is None

    @pytest.mark.asyncio
    async def test_not_found_prunes_local_record(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """NOT_FOUND on update prunes the record locally."""
        await store.fetch()
        resource_api.fail_next("update", NotFoundError(resource="members", resource_id="m25"))

        result = await store.update("m25", {"grade": "master"})

        assert result.error_kind == ErrorKind.NOT_FOUND
        assert "m25" not in _ids(store)

    @pytest.mark.asyncio
    async def test_writes_apply_against_current_state(self, store: MemberStore) -> None:
        """Concurrent writes each apply against the latest records."""
        await store.fetch()

        results = await asyncio.gather(
            store.update("m25", {"grade": "master"}),
            store.delete("m24"),
            store.update("m23", {"grade": "fellow_craft"}),
        )

        assert all(r.ok for r in results)
        assert _ids(store)[:2] == ["m25", "m23"]
        assert store.records[0].grade == "master"
        assert store.records[1].grade == "fellow_craft"


class TestGetAndSelect:
    @pytest.mark.asyncio
    async def test_get_sets_selected(self, store: MemberStore) -> None:
        """get stores the fetched record as the selection."""
        result = await store.get("m03")

        assert result.ok
        assert store.selected == result.value

    @pytest.mark.asyncio
    async def test_get_missing_other_record_keeps_selection(self, store: MemberStore) -> None:
        """NOT_FOUND for another record leaves the selection alone."""
        await store.fetch()
        store.select(store.records[0])

        result = await store.get("nobody")

        assert result.error_kind == ErrorKind.NOT_FOUND
        assert store.selected is not None

    @pytest.mark.asyncio
    async def test_get_missing_selected_record_prunes_it(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """NOT_FOUND for the selected record clears it and prunes it."""
        await store.fetch()
        store.select(store.records[0])
        resource_api.fail_next("get", NotFoundError(resource="members", resource_id="m25"))

        await store.get("m25")

        assert store.selected is None
        assert "m25" not in _ids(store)

    def test_select_none(self, store: MemberStore) -> None:
        """Selecting None clears the selection."""
        store.select(None)
        assert store.selected is None


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_burst_fetches_once(
        self, resource_api: ResourceApiStub
    ) -> None:
        """A burst of search keystrokes produces a single fetch."""
        store = _store(resource_api, delay=0.02)

        for text in ("m", "m0", "m07"):
            store.set_search(text)
            await asyncio.sleep(0.002)
        await asyncio.sleep(0.06)
        await store.flush_search()

        list_calls = [c for c in resource_api.calls if c[0] == "list_page"]
        assert len(list_calls) == 1
        assert list_calls[0][2]["search"] == "m07"
        assert _ids(store) == ["m07"]

    @pytest.mark.asyncio
    async def test_flush_search_applies_immediately(self, store: MemberStore) -> None:
        """flush_search applies the pending search without waiting."""
        store.set_search("m12")
        await store.flush_search()

        assert store.filters["search"] == "m12"
        assert _ids(store) == ["m12"]


class TestErrorsAndTeardown:
    @pytest.mark.asyncio
    async def test_clear_error(
        self, store: MemberStore, resource_api: ResourceApiStub
    ) -> None:
        """clear_error returns the store to idle."""
        resource_api.fail_next("list_page", TransientNetworkError("down"))
        await store.fetch()

        store.clear_error()

        assert store.status == CollectionStatus.IDLE
        assert store.error_message is None

    @pytest.mark.asyncio
    async def test_close_discards_in_flight_fetch(self, resource_api: ResourceApiStub) -> None:
        """Closing during a fetch discards its response."""
        store = _store(resource_api)
        gate = resource_api.hold_next_list()

        pending = asyncio.create_task(store.fetch())
        await asyncio.sleep(0)
        store.close()
        gate.set()
        result = await pending

        assert result.error_kind == ErrorKind.CLOSED
        assert store.records == ()

    @pytest.mark.asyncio
    async def test_commands_after_close(self, store: MemberStore) -> None:
        """Every command after close fails with CLOSED."""
        store.close()

        results: list[Any] = [
            await store.fetch(),
            await store.create({}),
            await store.merge_filters({"grade": "master"}),
            await store.delete("m1"),
        ]

        assert all(r.error_kind == ErrorKind.CLOSED for r in results)

    @pytest.mark.asyncio
    async def test_close_cancels_pending_search(
        self, resource_api: ResourceApiStub
    ) -> None:
        """Closing cancels a pending debounced search."""
        store = _store(resource_api, delay=0.01)

        store.set_search("m07")
        store.close()
        await asyncio.sleep(0.05)

        assert resource_api.calls == []


class TestStatistics:
    @pytest.mark.asyncio
    async def test_statistics_memoized_on_records(self, store: MemberStore) -> None:
        """Statistics are cached until the records change."""
        await store.fetch()

        first = store.statistics()
        assert store.statistics() is first
        assert first.total == 10

        await store.delete("m25")

        assert store.statistics() is not first
        assert store.statistics().total == 9
