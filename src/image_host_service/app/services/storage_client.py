import hashlib
import random
import string
import time
from typing import Any

import httpx
from loguru import logger

from ..core.config import StorageCredentials
from .domain import DeletionResult, NamingOptions, StorageError, StoredImageDescriptor

PUBLIC_ID_PREFIX = "img"
PUBLIC_ID_SUFFIX_LENGTH = 9
_BASE36_ALPHABET = string.digits + string.ascii_lowercase

# Incoming transformation: automatic quality and format, progressive delivery
UPLOAD_TRANSFORMATION = "q_auto,f_auto,fl_progressive"


def generate_public_id() -> str:
    """Build an identifier hint like ``img_1718031234567_k3j9x0a2b``."""
    suffix = "".join(random.choices(_BASE36_ALPHABET, k=PUBLIC_ID_SUFFIX_LENGTH))
    return f"{PUBLIC_ID_PREFIX}_{int(time.time() * 1000)}_{suffix}"


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """SHA-1 signature over the sorted, non-empty parameters followed by the secret."""
    to_sign = "&".join(
        f"{key}={value}"
        for key, value in sorted(params.items())
        if value is not None and value != ""
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryStorageClient:
    def __init__(
        self,
        credentials: StorageCredentials,
        api_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float | None = None,
    ):
        self.credentials = credentials
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _endpoint(self, resource_type: str, action: str) -> str:
        return f"{self.api_url}/{self.credentials.cloud_name}/{resource_type}/{action}"

    def _ensure_configured(self) -> None:
        if not self.credentials.is_configured:
            raise StorageError("Cloudinary credentials are not configured")

    def _signed_payload(self, params: dict[str, Any]) -> dict[str, Any]:
        payload = {key: value for key, value in params.items() if value is not None}
        payload["timestamp"] = int(time.time())
        payload["signature"] = sign_params(payload, self.credentials.api_secret)
        payload["api_key"] = self.credentials.api_key
        return payload

    async def store(
        self, data: bytes, options: NamingOptions
    ) -> StoredImageDescriptor:
        """
        Upload an encoded image to Cloudinary.

        The identifier returned by the provider is authoritative; ``options.public_id``
        is only requested.

        Args:
            data: Encoded image bytes
            options: Requested identifier, folder and resource type

        Returns:
            StoredImageDescriptor built from the provider response. ``original_filename``
            is left empty for the caller to fill in.

        Raises:
            StorageError: Missing credentials, network failure or provider rejection
        """
        self._ensure_configured()

        payload = self._signed_payload(
            {
                "public_id": options.public_id,
                "folder": options.folder,
                "transformation": UPLOAD_TRANSFORMATION,
            }
        )
        url = self._endpoint(options.resource_type, "upload")

        logger.info(f"Uploading {len(data)} bytes to Cloudinary as {options.public_id}")

        result = await self._post(
            url,
            data=payload,
            files={"file": (options.public_id, data, "image/jpeg")},
        )

        try:
            descriptor = StoredImageDescriptor(
                url=result["secure_url"],
                public_id=result["public_id"],
                size=result["bytes"],
                width=result["width"],
                height=result["height"],
                format=result["format"],
                original_filename="",
            )
        except KeyError as e:
            raise StorageError(f"Invalid response format: missing {e}") from e

        logger.info(f"Cloudinary upload succeeded: {descriptor.public_id}")
        return descriptor

    async def delete(self, public_id: str) -> DeletionResult:
        """
        Destroy an uploaded image.

        Unknown identifiers are not an error: the provider answers
        ``{"result": "not found"}`` and that result is returned as is.
        """
        self._ensure_configured()

        payload = self._signed_payload({"public_id": public_id})
        result = await self._post(self._endpoint("image", "destroy"), data=payload)

        logger.info(f"Cloudinary deletion of {public_id}: {result}")
        return DeletionResult(raw=result)

    async def _post(self, url: str, **kwargs) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, **kwargs)

        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling Cloudinary {url}: {e}")
            raise StorageError(f"Request timeout: {str(e)}") from e

        except httpx.RequestError as e:
            logger.error(f"Network error calling Cloudinary {url}: {e}")
            raise StorageError(f"Network error: {str(e)}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code != 200:
            message = _error_message(body) or response.text
            logger.error(f"Cloudinary error (HTTP {response.status_code}): {message}")
            raise StorageError(message, status_code=response.status_code)

        if not isinstance(body, dict):
            raise StorageError("Failed to parse Cloudinary response")

        return body


def _error_message(body: Any) -> str | None:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message")
    return None
