"""Media upload gateway backed by Cloudinary's signed upload endpoint."""

import asyncio
import hashlib
import logging
import time

import httpx

from .errors import UploadError, UploadTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_URL = "https://api.cloudinary.com/v1_1"


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Cloudinary request signature: sha1 of the sorted params plus the secret."""
    payload = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1((payload + api_secret).encode("utf-8")).hexdigest()


class MediaUploader:
    """Streams an in-memory buffer to the image host under a fixed folder.

    The ``httpx.AsyncClient`` is owned by the caller and may be shared by
    every request; the uploader itself keeps no per-request state.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "usuarios",
        upload_url: str = DEFAULT_UPLOAD_URL,
        timeout: float | None = 30.0,
    ):
        self._client = client
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self.folder = folder
        self._upload_url = upload_url.rstrip("/")
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self._upload_url}/{self._cloud_name}/image/upload"

    async def upload(
        self,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> str:
        """Upload ``data`` and return the host's persistent ``secure_url``.

        Raises:
            UploadTimeoutError: the host did not answer in time.
            UploadError: any other transport failure, an error reply, or a
                reply without a URL. The host may still hold a partial object.
        """
        if not (self._cloud_name and self._api_key and self._api_secret):
            logger.error("Image upload failed: image host credentials are not configured")
            raise UploadError("Image host credentials are not configured")

        params = {"folder": self.folder, "timestamp": str(int(time.time()))}
        form = {
            **params,
            "api_key": self._api_key,
            "signature": sign_params(params, self._api_secret),
        }
        files = {
            "file": (
                filename or "upload",
                data,
                content_type or "application/octet-stream",
            )
        }

        try:
            # httpx bounds each phase; wait_for bounds the whole exchange.
            resp = await asyncio.wait_for(
                self._client.post(
                    self.endpoint, data=form, files=files, timeout=self._timeout
                ),
                timeout=self._timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            logger.warning("Image upload timed out after %ss", self._timeout)
            raise UploadTimeoutError(
                f"Image upload timed out after {self._timeout}s", cause=exc
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Image upload failed: %s", exc)
            raise UploadError(f"Image upload failed: {exc}", cause=exc) from exc

        if resp.status_code >= 400:
            detail = _error_detail(resp)
            logger.error("Image host rejected upload (%d): %s", resp.status_code, detail)
            raise UploadError(f"Image host returned {resp.status_code}: {detail}")

        try:
            url = resp.json()["secure_url"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Image host reply carried no secure_url: %s", resp.text[:200])
            raise UploadError("Image host reply carried no secure_url", cause=exc) from exc

        logger.info("Uploaded %d bytes to %s", len(data), url)
        return url


def _error_detail(resp: httpx.Response) -> str:
    try:
        return resp.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return resp.text[:200]
