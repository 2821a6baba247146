"""Bootstrap wiring for lodge admin stores.

LodgeAdminClients is the composition root: it owns the Remote API
implementation and hands out fresh, independent controllers. Nothing is
cached at module level; two screens asking for members() get two stores.
"""

from __future__ import annotations

from types import TracebackType

from lodge_admin.application.ports.attendance_api import AttendanceApiProtocol
from lodge_admin.application.ports.resource_api import ResourceApiProtocol
from lodge_admin.application.ports.time_authority import TimeAuthorityProtocol
from lodge_admin.application.services.attendance_machine import AttendanceStateMachine
from lodge_admin.application.services.collection_store import CollectionStore
from lodge_admin.application.services.statistics import (
    DocumentStatistics,
    MemberStatistics,
    ProgramStatistics,
    document_statistics,
    member_statistics,
    program_statistics,
)
from lodge_admin.application.services.time_authority_service import TimeAuthorityService
from lodge_admin.config.client_config import LodgeClientConfig
from lodge_admin.domain.models.filter_spec import (
    DOCUMENT_FILTERS,
    MEMBER_FILTERS,
    PROGRAM_FILTERS,
)
from lodge_admin.domain.models.records import Document, Member, Program
from lodge_admin.infrastructure.adapters.http.lodge_api_client import LodgeApiClient

MemberStore = CollectionStore[Member, MemberStatistics]
DocumentStore = CollectionStore[Document, DocumentStatistics]
ProgramStore = CollectionStore[Program, ProgramStatistics]


class LodgeAdminClients:
    """Factory for per-screen controllers sharing one Remote API.

    Example:
        >>> async with LodgeAdminClients.from_config(config) as clients:
        ...     members = clients.members()
        ...     await members.fetch()
    """

    def __init__(
        self,
        config: LodgeClientConfig,
        resources: ResourceApiProtocol,
        attendance_api: AttendanceApiProtocol,
        time_authority: TimeAuthorityProtocol | None = None,
        owned_client: LodgeApiClient | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            config: Page size and debounce defaults for new stores.
            resources: Paginated collection endpoints.
            attendance_api: Attendance sub-resource endpoints.
            time_authority: Clock for attendance timestamps (system clock
                if omitted).
            owned_client: HTTP client to close in aclose(), if this factory
                created it.
        """
        self.config = config
        self._resources = resources
        self._attendance_api = attendance_api
        self._time = time_authority or TimeAuthorityService()
        self._owned_client = owned_client

    @classmethod
    def from_config(
        cls,
        config: LodgeClientConfig,
        time_authority: TimeAuthorityProtocol | None = None,
    ) -> LodgeAdminClients:
        """Wire every store to one HTTP client built from config."""
        client = LodgeApiClient(config)
        return cls(
            config,
            resources=client,
            attendance_api=client,
            time_authority=time_authority,
            owned_client=client,
        )

    async def __aenter__(self) -> LodgeAdminClients:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owned_client is not None:
            await self._owned_client.aclose()

    def members(self) -> MemberStore:
        return CollectionStore(
            self._resources,
            MEMBER_FILTERS,
            Member.from_dict,
            member_statistics,
            page_size=self.config.default_page_size,
            search_delay_seconds=self.config.search_delay_seconds,
        )

    def documents(self) -> DocumentStore:
        return CollectionStore(
            self._resources,
            DOCUMENT_FILTERS,
            Document.from_dict,
            document_statistics,
            page_size=self.config.default_page_size,
            search_delay_seconds=self.config.search_delay_seconds,
        )

    def programs(self) -> ProgramStore:
        return CollectionStore(
            self._resources,
            PROGRAM_FILTERS,
            Program.from_dict,
            program_statistics,
            page_size=self.config.default_page_size,
            search_delay_seconds=self.config.search_delay_seconds,
        )

    def attendance(self, program_id: str) -> AttendanceStateMachine:
        return AttendanceStateMachine(self._attendance_api, program_id, self._time)
