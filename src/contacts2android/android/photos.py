"""Read photo bytes for a contact photo item."""

import base64
import binascii
import logging
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx

from contacts2android.android.resolver import ContentResolver
from contacts2android.config import MAX_PHOTO_SIZE
from contacts2android.exceptions import PhotoLoadError, ProviderError
from contacts2android.models import ContactField

logger = logging.getLogger(__name__)

BUFFER_SIZE = 8192


class PhotoLoader:
    """Loads photo bytes from a base64 value or a url, at most ``max_size`` bytes.

    Supported urls: ``content:`` (through the content resolver), ``http:`` and
    ``https:`` (through httpx), ``file:`` and bare filesystem paths.
    """

    def __init__(
        self,
        resolver: ContentResolver,
        max_size: int = MAX_PHOTO_SIZE,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.resolver = resolver
        self.max_size = max_size
        self.timeout = timeout
        self._client = client

    def load(self, photo: ContactField) -> bytes:
        """Return the photo bytes.

        Raises:
            PhotoLoadError: value missing, undecodable, unreadable or too large
        """
        if not photo.value:
            raise PhotoLoadError("Photo has no value")

        if (photo.type or "").lower() == "base64":
            # Encoders wrap lines every 76 characters
            encoded = "".join(photo.value.split())
            try:
                data = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as e:
                raise PhotoLoadError(f"Invalid base64 photo: {e}") from e
            return self._check_size(data, "base64 photo")

        return self._load_url(photo.value)

    def _check_size(self, data: bytes, source: str) -> bytes:
        if len(data) > self.max_size:
            raise PhotoLoadError(f"Photo larger than {self.max_size} bytes: {source}")
        return data

    def _load_url(self, url: str) -> bytes:
        scheme = urlsplit(url).scheme.lower()

        if scheme == "content":
            try:
                data = self.resolver.open_input_stream(url)
            except ProviderError as e:
                raise PhotoLoadError(f"Could not read {url}: {e}") from e
            return self._check_size(data, url)

        if scheme in ("http", "https"):
            return self._download(url)

        if scheme == "file":
            path = Path(unquote(urlsplit(url).path))
        elif scheme == "":
            path = Path(url)
        else:
            raise PhotoLoadError(f"Unsupported photo url: {url}")

        try:
            with path.open("rb") as f:
                data = f.read(self.max_size + 1)
        except OSError as e:
            raise PhotoLoadError(f"Could not read {path}: {e}") from e
        return self._check_size(data, str(path))

    def _download(self, url: str) -> bytes:
        client = self._client or httpx.Client(timeout=self.timeout, follow_redirects=True)
        buffer = bytearray()
        try:
            with client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise PhotoLoadError(f"Photo download failed ({response.status_code}): {url}")
                for chunk in response.iter_bytes(BUFFER_SIZE):
                    buffer.extend(chunk)
                    if len(buffer) > self.max_size:
                        break
        except httpx.HTTPError as e:
            raise PhotoLoadError(f"Photo download failed: {e}") from e
        finally:
            if self._client is None:
                client.close()
        return self._check_size(bytes(buffer), url)
