"""Stored asset value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredAsset:
    """Descriptor returned by the media storage service for one upload."""

    storage_id: str
    url: str
