"""Media storage adapters."""

from .cloudinary_media_storage_service import CloudinaryMediaStorageService


__all__ = ["CloudinaryMediaStorageService"]
