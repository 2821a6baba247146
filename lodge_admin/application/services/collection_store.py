"""Collection Store: one domain's fetched page, query and CRUD orchestration.

A CollectionStore owns, exclusively:
    - records: the last fetched page, server order preserved
    - status / error: idle, loading or error plus the last failure
    - query: a QueryState (search, filters, page, page size)
    - selected: the record opened by get() or select()

Fetch ordering:
    Every fetch takes a new sequence number. A response is applied only if
    its sequence is still the latest issued and the store is not closed;
    otherwise it is discarded and the call returns SUPERSEDED (or CLOSED).
    Discarded responses never touch records, status or the error field.

Writes:
    create/update/delete are dispatched in call order and applied when the
    server acknowledges them, reading the store's records at apply time.
    Nothing is retried. A NotFoundError prunes the id from local state.

Every public command returns a Result; LodgeAdminError never escapes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from lodge_admin.application.ports.resource_api import ResourceApiProtocol
from lodge_admin.application.services.base import LoggingMixin
from lodge_admin.application.services.debounce import DebouncedInput
from lodge_admin.application.services.query_state import QueryState
from lodge_admin.application.services.statistics import IdentityMemo
from lodge_admin.domain.errors.query import InvalidQueryError
from lodge_admin.domain.errors.remote import NotFoundError
from lodge_admin.domain.exceptions import LodgeAdminError
from lodge_admin.domain.models.collection import CollectionStatus, Pagination
from lodge_admin.domain.models.filter_spec import (
    DEFAULT_PAGE_SIZE,
    SEARCH_KEY,
    FilterSpec,
)
from lodge_admin.domain.models.records import Identified
from lodge_admin.domain.models.result import ErrorKind, Result

T = TypeVar("T", bound=Identified)
S = TypeVar("S")

RecordParser = Callable[[dict[str, Any]], T]
Records = tuple[T, ...]


class CollectionStore(LoggingMixin, Generic[T, S]):
    """Search/filter/paginate/cache controller for one remote collection.

    Example:
        >>> store = CollectionStore(api, MEMBER_FILTERS, Member.from_dict,
        ...                         member_statistics)
        >>> result = await store.merge_filters({"grade": "master"})
        >>> if result.ok:
        ...     render(store.records, store.statistics())
    """

    def __init__(
        self,
        api: ResourceApiProtocol,
        spec: FilterSpec,
        parse: RecordParser[T],
        statistics: Callable[[Records[T]], S],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        search_delay_seconds: float = 0.5,
    ) -> None:
        """Initialize an empty store.

        Args:
            api: Remote API implementation.
            spec: FilterSpec of the domain; spec.domain is the resource path.
            parse: Builds a record from a raw server dict.
            statistics: Pure projection over the records tuple.
            page_size: Initial page size (must be a permitted option).
            search_delay_seconds: Quiet period for set_search().

        Raises:
            InvalidPageSizeError: If page_size is not a permitted option.
        """
        self._api = api
        self._parse = parse
        self._resource = spec.domain
        self._query = QueryState(spec, page_size=page_size)
        self._statistics = IdentityMemo(statistics)
        self._search = DebouncedInput[str](
            self._on_search_settled, delay_seconds=search_delay_seconds
        )

        self._records: Records[T] = ()
        self._status = CollectionStatus.IDLE
        self._error_message: str | None = None
        self._error_kind: ErrorKind | None = None
        self._field_errors: dict[str, list[str]] = {}
        self._selected: T | None = None
        self._sequence = 0
        self._closed = False

        self._init_logger(component="collection")

    # =========================================================================
    # Selectors
    # =========================================================================

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def records(self) -> Records[T]:
        return self._records

    @property
    def status(self) -> CollectionStatus:
        return self._status

    @property
    def is_loading(self) -> bool:
        return self._status == CollectionStatus.LOADING

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def error_kind(self) -> ErrorKind | None:
        return self._error_kind

    @property
    def field_errors(self) -> dict[str, list[str]]:
        return dict(self._field_errors)

    @property
    def filters(self) -> Mapping[str, str]:
        return self._query.filters

    @property
    def pagination(self) -> Pagination:
        return self._query.pagination

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def has_active_filters(self) -> bool:
        return self._query.has_active_filters

    @property
    def selected(self) -> T | None:
        return self._selected

    @property
    def closed(self) -> bool:
        return self._closed

    def find(self, record_id: str) -> T | None:
        return next((r for r in self._records if r.id == record_id), None)

    def statistics(self) -> S:
        """Derived statistics, recomputed only when records is a new tuple."""
        return self._statistics(self._records)

    # =========================================================================
    # Fetch and query commands
    # =========================================================================

    async def fetch(self) -> Result[Records[T]]:
        """Fetch the current page for the current query.

        On success records and totals are replaced wholesale. On failure the
        previously held records stay in place and the error is recorded.
        """
        if self._closed:
            return self._closed_result()

        self._sequence += 1
        sequence = self._sequence
        params = self._query.query_params()
        log = self._log_operation("fetch", resource=self._resource, sequence=sequence)

        self._status = CollectionStatus.LOADING
        log.debug("fetch_started", params=params)

        try:
            page = await self._api.list_page(self._resource, params)
            records = tuple(self._parse(item) for item in page.items)
        except LodgeAdminError as e:
            if not self._is_current(sequence):
                return self._discarded(sequence, log)
            self._record_failure(e)
            self._status = CollectionStatus.ERROR
            log.warning("fetch_failed", error=str(e), error_kind=self._error_kind)
            return Result.from_exception(e)

        if not self._is_current(sequence):
            return self._discarded(sequence, log)

        self._records = records[: self._query.pagination.page_size]
        self._query.apply_totals(page.total)
        self._status = CollectionStatus.IDLE
        self._clear_failure()
        log.info(
            "fetch_completed",
            count=len(self._records),
            total_items=page.total,
        )
        return Result.succeed(self._records)

    async def merge_filters(self, partial: Mapping[str, object]) -> Result[Records[T]]:
        """Merge filter values, go back to page 1 and fetch.

        Rejected keys or values fail with INVALID_INPUT and change nothing.
        """
        if self._closed:
            return self._closed_result()
        try:
            self._query.merge_filters(partial)
        except InvalidQueryError as e:
            self._log_operation("merge_filters", resource=self._resource).info(
                "filters_rejected", error=str(e)
            )
            return Result.from_exception(e)
        return await self.fetch()

    async def reset_filters(self) -> Result[Records[T]]:
        if self._closed:
            return self._closed_result()
        self._search.cancel()
        self._query.reset_filters()
        return await self.fetch()

    async def set_page(self, page: int) -> Result[Records[T]]:
        """Move to a page (clamped to the known range) and fetch it."""
        if self._closed:
            return self._closed_result()
        self._query.set_page(page)
        return await self.fetch()

    async def set_page_size(self, page_size: int) -> Result[Records[T]]:
        if self._closed:
            return self._closed_result()
        try:
            self._query.set_page_size(page_size)
        except InvalidQueryError as e:
            return Result.from_exception(e)
        return await self.fetch()

    def set_search(self, text: str) -> None:
        """Feed raw search text; it is merged and fetched once typing settles."""
        if self._closed:
            return
        self._search.push(text)

    async def flush_search(self) -> None:
        """Apply pending search text now and wait for the resulting fetch."""
        self._search.flush()
        await self._search.wait_idle()

    async def _on_search_settled(self, text: str) -> Result[Records[T]]:
        return await self.merge_filters({SEARCH_KEY: text})

    # =========================================================================
    # Record commands
    # =========================================================================

    async def get(self, record_id: str) -> Result[T]:
        """Fetch one record and make it the selected record."""
        if self._closed:
            return self._closed_result()
        log = self._log_operation("get", resource=self._resource, record_id=record_id)

        try:
            record = self._parse(await self._api.get(self._resource, record_id))
        except LodgeAdminError as e:
            return self._write_failed(e, record_id, log)

        if self._closed:
            return self._closed_result()
        self._selected = record
        self._replace(record)
        log.debug("record_loaded")
        return Result.succeed(record)

    def select(self, record: T | None) -> None:
        self._selected = record

    async def create(self, payload: Mapping[str, Any]) -> Result[T]:
        """Create a record and prepend the server's canonical copy.

        The page never grows beyond page_size: the last entry is dropped
        when the prepend would overflow it.
        """
        if self._closed:
            return self._closed_result()
        log = self._log_operation("create", resource=self._resource)

        try:
            record = self._parse(await self._api.create(self._resource, payload))
        except LodgeAdminError as e:
            return self._write_failed(e, None, log)

        if self._closed:
            return self._closed_result()
        page_size = self._query.pagination.page_size
        self._records = (record, *self._records)[:page_size]
        log.info("record_created", record_id=record.id)
        return Result.succeed(record)

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> Result[T]:
        """Update a record and replace it in place.

        A record that is not on the current page is left out of records,
        and the call still succeeds.
        """
        if self._closed:
            return self._closed_result()
        log = self._log_operation("update", resource=self._resource, record_id=record_id)

        try:
            record = self._parse(
                await self._api.update(self._resource, record_id, payload)
            )
        except LodgeAdminError as e:
            return self._write_failed(e, record_id, log)

        if self._closed:
            return self._closed_result()
        replaced = self._replace(record)
        if self._selected is not None and self._selected.id == record_id:
            self._selected = record
        log.info("record_updated", on_page=replaced)
        return Result.succeed(record)

    async def delete(self, record_id: str) -> Result[None]:
        """Delete a record and drop it from records.

        pagination.total_items is left as is; the next fetch reconciles it.
        """
        if self._closed:
            return self._closed_result()
        log = self._log_operation("delete", resource=self._resource, record_id=record_id)

        try:
            await self._api.delete(self._resource, record_id)
        except LodgeAdminError as e:
            return self._write_failed(e, record_id, log)

        if self._closed:
            return self._closed_result()
        self._prune(record_id)
        log.info("record_deleted")
        return Result.succeed()

    def clear_error(self) -> None:
        self._clear_failure()
        if self._status == CollectionStatus.ERROR:
            self._status = CollectionStatus.IDLE

    def close(self) -> None:
        """Tear down: cancel pending search and ignore every later response."""
        if self._closed:
            return
        self._closed = True
        self._sequence += 1
        self._search.close()
        self._log_operation("close", resource=self._resource).debug("store_closed")

    # =========================================================================
    # Internals
    # =========================================================================

    def _is_current(self, sequence: int) -> bool:
        return not self._closed and sequence == self._sequence

    def _discarded(self, sequence: int, log: Any) -> Result[Records[T]]:
        if self._closed:
            log.debug("fetch_discarded_after_close")
            return self._closed_result()
        log.info("fetch_superseded", latest_sequence=self._sequence)
        return Result.fail(
            ErrorKind.SUPERSEDED,
            f"Fetch #{sequence} superseded by fetch #{self._sequence}",
        )

    def _write_failed(
        self,
        error: LodgeAdminError,
        record_id: str | None,
        log: Any,
    ) -> Result[Any]:
        if self._closed:
            return self._closed_result()
        if isinstance(error, NotFoundError) and record_id is not None:
            self._prune(record_id)
        self._record_failure(error)
        log.warning("write_failed", error=str(error), error_kind=self._error_kind)
        return Result.from_exception(error)

    def _replace(self, record: T) -> bool:
        current = self._records
        if not any(r.id == record.id for r in current):
            return False
        self._records = tuple(record if r.id == record.id else r for r in current)
        return True

    def _prune(self, record_id: str) -> None:
        if any(r.id == record_id for r in self._records):
            self._records = tuple(r for r in self._records if r.id != record_id)
        if self._selected is not None and self._selected.id == record_id:
            self._selected = None

    def _record_failure(self, error: LodgeAdminError) -> None:
        result: Result[Any] = Result.from_exception(error)
        self._error_message = result.message
        self._error_kind = result.error_kind
        self._field_errors = dict(result.field_errors)

    def _clear_failure(self) -> None:
        self._error_message = None
        self._error_kind = None
        self._field_errors = {}

    def _closed_result(self) -> Result[Any]:
        return Result.fail(ErrorKind.CLOSED, f"{self._resource} store is closed")
