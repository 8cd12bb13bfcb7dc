"""
Blob storage module - durable storage for uploaded audio.

Factory function for creating a storage backend based on configuration.
"""

from src.core.config import Settings, get_settings

from .base import BlobStorage, make_object_key

__all__ = ["BlobStorage", "create_blob_storage", "make_object_key"]


def create_blob_storage(settings: Settings | None = None) -> BlobStorage:
    """
    Factory function to create the configured blob storage backend.

    Args:
        settings: Optional settings override (defaults to get_settings()).

    Returns:
        BlobStorage implementation instance

    Raises:
        ValueError: If the provider is unknown
    """
    settings = settings or get_settings()
    provider = settings.storage_provider
    if provider == "local":
        from .local import LocalBlobStorage

        return LocalBlobStorage(settings.uploads_dir, settings.public_base_url)
    elif provider == "minio":
        from minio import Minio

        from .minio_storage import MinioBlobStorage

        client = Minio(
            endpoint=settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
        )
        return MinioBlobStorage(client, settings.minio_bucket, settings.minio_public_url)
    else:
        raise ValueError(f"Unknown storage provider: {provider}")
