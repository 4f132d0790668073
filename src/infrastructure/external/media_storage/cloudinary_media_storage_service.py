"""Cloudinary media storage client.

httpx async client for the signed upload and destroy endpoints of the
Cloudinary image API.
"""

from __future__ import annotations

import logging
import time

from typing import Any

import cloudinary.utils
import httpx

from src.domain.services.interfaces.media_storage_service import IMediaStorageService
from src.domain.value_objects.stored_asset import StoredAsset
from src.infrastructure.config.settings import Settings, get_settings
from src.infrastructure.exceptions import MediaStorageError


logger = logging.getLogger(__name__)


class CloudinaryMediaStorageService(IMediaStorageService):
    """Stores election images in Cloudinary."""

    BASE_URL = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._external_client = client
        self._owns_client = client is None

    @property
    def is_configured(self) -> bool:
        return bool(
            self._settings.cloudinary_cloud_name
            and self._settings.cloudinary_api_key
            and self._settings.cloudinary_api_secret
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Injected client, or a fresh one closed after the request."""
        if self._external_client is not None:
            return self._external_client
        return httpx.AsyncClient(timeout=self._settings.media_upload_timeout)

    async def upload(
        self, content: bytes, destination: str, filename: str | None = None
    ) -> StoredAsset:
        """Upload an image under ``{media_upload_root}/{destination}``.

        Args:
            content: Raw image bytes
            destination: Public id inside the upload root folder
            filename: Original filename sent along with the bytes

        Returns:
            StoredAsset with Cloudinary's public_id and secure_url

        Raises:
            MediaStorageError: If the request fails or the response is unusable
        """
        params: dict[str, Any] = {
            "folder": self._settings.media_upload_root,
            "public_id": destination,
            "timestamp": int(time.time()),
        }
        files = {"file": (filename or "upload", content)}
        data = await self._request("upload", params, files=files)

        public_id = data.get("public_id")
        secure_url = data.get("secure_url")
        if not public_id or not secure_url:
            raise MediaStorageError(
                "Upload response is missing public_id or secure_url",
                details={"destination": destination},
            )
        return StoredAsset(storage_id=public_id, url=secure_url)

    async def delete(self, storage_id: str) -> bool:
        """Destroy an uploaded image.

        Returns:
            True when Cloudinary answers ``{"result": "ok"}``
        """
        params: dict[str, Any] = {
            "public_id": storage_id,
            "timestamp": int(time.time()),
        }
        data = await self._request("destroy", params)
        return data.get("result") == "ok"

    async def _request(
        self,
        action: str,
        params: dict[str, Any],
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self.is_configured:
            raise MediaStorageError("Cloudinary credentials are not configured")

        url = f"{self.BASE_URL}/{self._settings.cloudinary_cloud_name}/image/{action}"
        form = {
            **params,
            "api_key": self._settings.cloudinary_api_key,
            "signature": cloudinary.utils.api_sign_request(
                params, self._settings.cloudinary_api_secret
            ),
        }
        client = await self._get_client()

        try:
            response = await client.post(url, data=form, files=files)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Cloudinary {action} failed with {e.response.status_code}: "
                f"{e.response.text}"
            )
            raise MediaStorageError(
                f"Cloudinary {action} failed: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise MediaStorageError(f"Cloudinary {action} timed out") from e
        except httpx.HTTPError as e:
            raise MediaStorageError(f"Cloudinary {action} HTTP error: {e}") from e
        except ValueError as e:
            raise MediaStorageError(f"Cloudinary {action} returned invalid JSON") from e
        finally:
            if self._owns_client:
                await client.aclose()
