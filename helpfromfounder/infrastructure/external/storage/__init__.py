"""Image storage backends."""

from helpfromfounder.infrastructure.external.storage.factory import StorageFactory
from helpfromfounder.infrastructure.external.storage.protocol import ImageStorageProtocol

__all__ = ["ImageStorageProtocol", "StorageFactory"]
