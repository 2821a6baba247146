"""Application layer: stores, state machines and the ports they drive."""
