"""
Lodge Admin - client-side state controllers for lodge administration.

Holds the member roster, document library and program (scheduled event)
collections fetched from the lodge REST backend, plus the per-event
attendance workflow layered on top of them.

Ground rules:
- The server is the source of truth; local state only mirrors it
- Every command returns a Result, nothing escapes to the view layer
- No retries here; retry policy belongs to the caller
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
