"""HTTP adapter for the lodge REST API."""

from lodge_admin.infrastructure.adapters.http.lodge_api_client import LodgeApiClient

__all__ = ["LodgeApiClient"]
