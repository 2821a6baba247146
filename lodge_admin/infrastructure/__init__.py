"""Infrastructure layer: HTTP adapter, in-memory stubs and observability."""
