"""Application layer: cache, services and workers."""
