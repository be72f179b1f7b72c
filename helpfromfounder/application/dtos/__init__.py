"""Application DTOs (read-models and command inputs)."""
