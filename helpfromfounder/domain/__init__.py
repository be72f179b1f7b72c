"""Domain layer: entities, enums, and exceptions.

No dependencies on FastAPI or the document store.
"""
