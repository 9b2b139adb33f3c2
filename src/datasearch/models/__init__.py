"""Backend-agnostic query, item and result models."""
