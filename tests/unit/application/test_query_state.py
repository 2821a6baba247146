"""Unit tests for QueryState (Filter/Pagination state)."""

from __future__ import annotations

import pytest

from lodge_admin.application.services.query_state import QuerySnapshot, QueryState
from lodge_admin.domain.errors import (
    InvalidFilterValueError,
    InvalidPageSizeError,
    UnknownFilterError,
)
from lodge_admin.domain.models.filter_spec import DOCUMENT_FILTERS, MEMBER_FILTERS


@pytest.fixture
def state() -> QueryState:
    return QueryState(DOCUMENT_FILTERS, page_size=10)


class TestMergeFilters:
    def test_sequence_is_right_fold_of_shallow_merges(self, state: QueryState) -> None:
        """Successive merges fold into the filters and always return to page one."""
        updates = [
            {"type": "minutes"},
            {"status": "approved", "search": "budget"},
            {"type": "plan"},
        ]
        expected = DOCUMENT_FILTERS.defaults()
        for update in updates:
            state.apply_totals(100)
            state.set_page(4)
            state.merge_filters(update)
            expected = {**expected, **update}

            assert dict(state.filters) == expected
            assert state.pagination.page == 1

    def test_rejected_update_leaves_state_untouched(self, state: QueryState) -> None:
        """A rejected update leaves filters and paging exactly as before."""
        state.merge_filters({"type": "minutes"})
        before = state.snapshot()

        with pytest.raises(UnknownFilterError):
            state.merge_filters({"status": "approved", "colour": "red"})

        assert state.snapshot() == before

    @pytest.mark.parametrize("value", [["approved"], {"status": "approved"}])
    def test_unhashable_value_is_rejected_without_change(
        self, state: QueryState, value: object
    ) -> None:
        """A list or dict value raises InvalidFilterValueError and keeps the snapshot."""
        state.merge_filters({"type": "minutes"})
        before = state.snapshot()

        with pytest.raises(InvalidFilterValueError):
            state.merge_filters({"status": value})

        assert state.snapshot() == before


class TestResetFilters:
    def test_restores_defaults_and_page(self, state: QueryState) -> None:
        """Reset restores default filters and page one."""
        state.merge_filters({"type": "minutes", "search": "x"})
        state.apply_totals(50)
        state.set_page(3)

        state.reset_filters()

        assert dict(state.filters) == DOCUMENT_FILTERS.defaults()
        assert state.pagination.page == 1
        assert not state.has_active_filters

    def test_is_idempotent(self, state: QueryState) -> None:
        """Resetting twice yields the same snapshot."""
        state.merge_filters({"grade": "master"})

        once = state.reset_filters()
        twice = state.reset_filters()

        assert once == twice


class TestPaging:
    @pytest.mark.parametrize("page", [-3, 0, 1, 2, 5, 6, 99])
    def test_set_page_leaves_filters_unchanged(self, state: QueryState, page: int) -> None:
        """Any requested page is clamped and filters are untouched."""
        state.merge_filters({"status": "review"})
        state.apply_totals(45)
        filters_before = dict(state.filters)

        state.set_page(page)

        assert dict(state.filters) == filters_before
        assert 1 <= state.pagination.page <= 5

    def test_set_page_clamps_to_last_page(self, state: QueryState) -> None:
        """A page past the end lands on the last page."""
        state.apply_totals(45)
        state.set_page(99)
        assert state.pagination.page == 5

    def test_set_page_size_resets_page(self, state: QueryState) -> None:
        """Changing the page size goes back to page one."""
        state.apply_totals(45)
        state.set_page(3)

        state.set_page_size(50)

        assert state.pagination.page == 1
        assert state.pagination.page_size == 50

    def test_invalid_page_size(self, state: QueryState) -> None:
        """An unknown page size is refused and the old size kept."""
        with pytest.raises(InvalidPageSizeError):
            state.set_page_size(7)
        assert state.pagination.page_size == 10

    def test_invalid_initial_page_size(self) -> None:
        """The constructor refuses a page size outside the options."""
        with pytest.raises(InvalidPageSizeError):
            QueryState(MEMBER_FILTERS, page_size=15)


class TestQueryParams:
    def test_includes_active_filters_and_paging(self, state: QueryState) -> None:
        """Query parameters combine active filters with page and limit."""
        state.merge_filters({"status": "approved"})
        assert state.query_params() == {"status": "approved", "page": "1", "limit": "10"}


class TestSubscribe:
    def test_listener_sees_every_query_change(self, state: QueryState) -> None:
        """Listeners see query changes only until they unsubscribe."""
        seen: list[QuerySnapshot] = []
        unsubscribe = state.subscribe(seen.append)

        state.merge_filters({"type": "plan"})
        state.apply_totals(30)  # totals are not a query change
        state.set_page(2)
        unsubscribe()
        state.reset_filters()

        assert len(seen) == 2
        assert seen[0].filters["type"] == "plan"
        assert seen[1].pagination.page == 2
