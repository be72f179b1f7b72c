"""Application layer: DTOs, ports, and use-case services."""
