"""HTTP adapter for the lodge REST API.

Implements ResourceApiProtocol and AttendanceApiProtocol on one owned
httpx.AsyncClient. Status codes map onto the domain error taxonomy:

    400, 422            -> ValidationError (field messages from `errors`)
    404                 -> NotFoundError
    409                 -> ConflictError
    408, 429, 5xx       -> TransientNetworkError (Retry-After honoured)
    timeout / transport -> TransientNetworkError (status_code 0)
    anything else       -> RemoteApiError

Nothing is retried here; retry is a caller decision.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import TracebackType
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as EnvelopeValidationError

from lodge_admin.application.ports.resource_api import ListPage
from lodge_admin.application.services.correlation import get_correlation_id
from lodge_admin.config.client_config import LodgeClientConfig
from lodge_admin.domain.errors.remote import (
    ConflictError,
    NotFoundError,
    RemoteApiError,
    TransientNetworkError,
    ValidationError,
)
from lodge_admin.infrastructure.adapters.http.wire_models import (
    DeleteEnvelope,
    ErrorBody,
    ItemEnvelope,
    ListEnvelope,
    RecordsEnvelope,
)

logger = structlog.get_logger(__name__)

E = TypeVar("E", bound=BaseModel)

CORRELATION_HEADER = "X-Correlation-ID"
TRANSIENT_STATUS_CODES = frozenset({408, 429})


class LodgeApiClient:
    """Async client for the lodge REST API.

    Use as an async context manager, or call aclose() when done.

    Example:
        >>> async with LodgeApiClient(config) as api:
        ...     page = await api.list_page("members", {"page": "1", "limit": "20"})
    """

    def __init__(
        self,
        config: LodgeClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: API location, credentials and timeout.
            transport: Optional httpx transport (httpx.MockTransport in tests).
        """
        self.config = config
        headers = {"Accept": "application/json"}
        if config.api_token:
            headers["Authorization"] = f"Bearer {config.api_token}"
        self._client = httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_seconds,
            headers=headers,
            transport=transport,
        )
        self._log = logger.bind(component="lodge_api_client", base_url=config.api_url)

    async def __aenter__(self) -> LodgeApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # ResourceApiProtocol
    # =========================================================================

    async def list_page(self, resource: str, params: Mapping[str, str]) -> ListPage:
        response = await self._request("GET", f"/{resource}", resource, params=dict(params))
        envelope = self._parse(response, ListEnvelope)
        pagination = envelope.pagination
        if pagination is None:
            return ListPage(
                items=tuple(envelope.data),
                total=len(envelope.data),
                limit=max(len(envelope.data), 1),
                total_pages=1 if envelope.data else 0,
            )
        return ListPage(
            items=tuple(envelope.data),
            page=pagination.page,
            limit=pagination.limit,
            total=pagination.total,
            total_pages=pagination.total_pages,
        )

    async def get(self, resource: str, record_id: str) -> dict[str, Any]:
        response = await self._request(
            "GET", f"/{resource}/{record_id}", resource, record_id=record_id
        )
        return self._parse(response, ItemEnvelope).data

    async def create(self, resource: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        response = await self._request("POST", f"/{resource}", resource, json=dict(payload))
        return self._parse(response, ItemEnvelope).data

    async def update(
        self,
        resource: str,
        record_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "PUT",
            f"/{resource}/{record_id}",
            resource,
            record_id=record_id,
            json=dict(payload),
        )
        return self._parse(response, ItemEnvelope).data

    async def delete(self, resource: str, record_id: str) -> None:
        response = await self._request(
            "DELETE", f"/{resource}/{record_id}", resource, record_id=record_id
        )
        if not response.content:
            return
        envelope = self._parse(response, DeleteEnvelope)
        if not envelope.success:
            raise RemoteApiError(
                f"Server refused to delete {resource}/{record_id}",
                status_code=response.status_code,
                detail=self._detail(response),
            )

    # =========================================================================
    # AttendanceApiProtocol
    # =========================================================================

    async def list_attendance(self, program_id: str) -> list[dict[str, Any]]:
        response = await self._request(
            "GET",
            f"/programs/{program_id}/attendance",
            "programs",
            record_id=program_id,
        )
        return self._parse(response, RecordsEnvelope).data

    async def record_attendance(
        self,
        program_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/programs/{program_id}/attendance",
            "programs",
            record_id=program_id,
            json=dict(payload),
        )
        return self._parse(response, ItemEnvelope).data

    # =========================================================================
    # Internals
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        resource: str,
        record_id: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and raise the domain error for any failure status.

        Raises:
            RemoteApiError: Or one of its subclasses.
        """
        headers: dict[str, str] = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers[CORRELATION_HEADER] = correlation_id

        log = self._log.bind(method=method, path=path)
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            log.warning("request_timeout", timeout_seconds=self.config.timeout_seconds)
            raise TransientNetworkError(
                f"Request timeout after {self.config.timeout_seconds}s",
                status_code=0,
            ) from e
        except httpx.RequestError as e:
            log.warning("request_failed", error=str(e))
            raise TransientNetworkError(f"Request failed: {e}", status_code=0) from e

        log.debug("response_received", status_code=response.status_code)
        if response.is_success:
            return response
        raise self._error_for(response, resource, record_id)

    def _error_for(
        self,
        response: httpx.Response,
        resource: str,
        record_id: str | None,
    ) -> RemoteApiError:
        status = response.status_code
        detail = self._detail(response)
        body = self._error_body(detail)
        message = body.text if body and body.text else None

        if status in (400, 422):
            return ValidationError(
                message or "Request rejected by server",
                field_errors=body.field_errors() if body else {},
                status_code=status,
                detail=detail,
            )

        if status == 404:
            target = f"{resource}/{record_id}" if record_id else resource
            return NotFoundError(
                message or f"Not found: {target}",
                resource=resource,
                resource_id=record_id,
                detail=detail,
            )

        if status == 409:
            return ConflictError(message or "Conflicting change rejected", detail=detail)

        if status in TRANSIENT_STATUS_CODES or 500 <= status < 600:
            return TransientNetworkError(
                message or f"Server error: {status}",
                status_code=status,
                retry_after=self._retry_after(response),
                detail=detail,
            )

        return RemoteApiError(
            message or f"Unexpected status: {status}",
            status_code=status,
            detail=detail,
        )

    def _parse(self, response: httpx.Response, envelope: type[E]) -> E:
        try:
            return envelope.model_validate(response.json())
        except (ValueError, EnvelopeValidationError) as e:
            self._log.warning(
                "malformed_response",
                envelope=envelope.__name__,
                status_code=response.status_code,
            )
            raise RemoteApiError(
                f"Malformed {envelope.__name__} from server: {e}",
                status_code=response.status_code,
                detail=response.text,
            ) from e

    @staticmethod
    def _detail(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_body(detail: Any) -> ErrorBody | None:
        if not isinstance(detail, dict):
            return None
        try:
            return ErrorBody.model_validate(detail)
        except EnvelopeValidationError:
            return None

    @staticmethod
    def _retry_after(response: httpx.Response) -> int | None:
        value = response.headers.get("Retry-After")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None
