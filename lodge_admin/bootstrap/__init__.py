"""Composition root: wires adapters, configuration and services."""

from lodge_admin.bootstrap.clients import (
    DocumentStore,
    LodgeAdminClients,
    MemberStore,
    ProgramStore,
)
from lodge_admin.bootstrap.logging import configure_logging

__all__: list[str] = [
    "DocumentStore",
    "LodgeAdminClients",
    "MemberStore",
    "ProgramStore",
    "configure_logging",
]
