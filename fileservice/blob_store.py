"""Local filesystem blob store with HMAC-signed, time-limited URLs."""

import hashlib
import hmac
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional
from urllib.parse import quote

from common.constants import STREAM_PIECE_SIZE_BYTES
from common.logging_config import get_logger
from fileservice import config
from fileservice.exceptions import BlobNotFoundError, InvalidSignatureError
from fileservice.utils import generate_uuid

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]')


@dataclass(frozen=True)
class StoredBlob:
    """
    Result of a blob upload.
    """
    url: str
    size: int
    checksum: str


def sanitize_name(name: str) -> str:
    sanitized = _UNSAFE_CHARS.sub('', name)
    return sanitized.strip('.') or "file"


class BlobStore:
    """
    Stores blobs as plain files under <root>/<container>/<blob_name>.
    """

    def __init__(
        self,
        root: Optional[str] = None,
        signing_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.root = Path(root or config.BLOB_ROOT)
        self._signing_key = (signing_key or config.URL_SIGNING_KEY).encode('utf-8')
        self.base_url = (base_url or config.PUBLIC_BASE_URL).rstrip('/')

    def _container_path(self, container: str) -> Path:
        return self.root / sanitize_name(container)

    def _blob_path(self, container: str, blob_name: str) -> Path:
        if sanitize_name(blob_name) != blob_name:
            raise BlobNotFoundError(f"Invalid blob name: {blob_name}")
        return self._container_path(container) / blob_name

    def blob_url(self, container: str, blob_name: str) -> str:
        return f"{self.base_url}/blobs/{quote(container)}/{quote(blob_name)}"

    def upload(self, container: str, blob_name: str, stream: BinaryIO, content_type: str) -> StoredBlob:
        """
        Write a stream to the container, hashing it on the way.

        Args:
            container: Container name (created on demand)
            blob_name: Sanitized blob name, see generate_unique_name
            stream: Readable binary stream
            content_type: MIME type, only logged; the record keeps it

        Returns:
            StoredBlob with the unsigned URL, byte size and sha256 checksum
        """
        path = self._blob_path(container, blob_name)
        path.parent.mkdir(parents=True, exist_ok=True)

        digest = hashlib.sha256()
        size = 0
        try:
            with open(path, 'wb') as f:
                while True:
                    piece = stream.read(STREAM_PIECE_SIZE_BYTES)
                    if not piece:
                        break
                    digest.update(piece)
                    size += len(piece)
                    f.write(piece)
        except Exception as e:
            logger.error(f"Error uploading blob {blob_name} to container {container}: {e}", exc_info=True)
            path.unlink(missing_ok=True)
            raise

        logger.info(f"Blob uploaded: {blob_name} ({size} bytes, {content_type}) to container {container}")
        return StoredBlob(url=self.blob_url(container, blob_name), size=size, checksum=digest.hexdigest())

    def download(self, container: str, blob_name: str) -> Iterator[bytes]:
        """
        Stream blob content in pieces.

        Raises:
            BlobNotFoundError: If the blob does not exist (checked eagerly)
        """
        path = self._blob_path(container, blob_name)
        if not path.is_file():
            raise BlobNotFoundError(f"Blob {blob_name} not found in container {container}")

        def stream_pieces():
            with open(path, 'rb') as f:
                while True:
                    piece = f.read(STREAM_PIECE_SIZE_BYTES)
                    if not piece:
                        break
                    yield piece

        logger.info(f"Blob download started: {blob_name} from container {container}")
        return stream_pieces()

    def local_path(self, container: str, blob_name: str) -> Path:
        path = self._blob_path(container, blob_name)
        if not path.is_file():
            raise BlobNotFoundError(f"Blob {blob_name} not found in container {container}")
        return path

    def delete(self, container: str, blob_name: str) -> bool:
        """
        Returns:
            True if the blob was deleted, False if it did not exist
        """
        path = self._blob_path(container, blob_name)
        if path.exists():
            path.unlink()
            logger.info(f"Blob deleted: {blob_name} from container {container}")
            return True
        logger.warning(f"Blob not found for deletion: {blob_name} in container {container}")
        return False

    def exists(self, container: str, blob_name: str) -> bool:
        try:
            return self._blob_path(container, blob_name).is_file()
        except BlobNotFoundError:
            return False

    def generate_unique_name(self, container: str, original_name: str) -> str:
        path = Path(original_name or "file")
        stem = sanitize_name(path.stem)
        extension = sanitize_name(path.suffix) if path.suffix else ""
        if extension and not extension.startswith('.'):
            extension = f".{extension}"

        blob_name = f"{stem}_{generate_uuid()}{extension}"
        while self.exists(container, blob_name):
            blob_name = f"{stem}_{generate_uuid()}{extension}"
        return blob_name

    def _sign(self, container: str, blob_name: str, expires: int) -> str:
        message = f"{container}/{blob_name}:{expires}".encode('utf-8')
        return hmac.new(self._signing_key, message, hashlib.sha256).hexdigest()

    def get_signed_url(self, container: str, blob_name: str, expiry_seconds: int, now: Optional[float] = None) -> tuple[str, int]:
        """
        Build a read-only URL valid for expiry_seconds.

        Returns:
            Tuple of (url, expires_at_epoch_seconds)

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        if not self.exists(container, blob_name):
            raise BlobNotFoundError(f"Blob {blob_name} not found in container {container}")

        issued_at = time.time() if now is None else now
        expires = int(issued_at + expiry_seconds)
        signature = self._sign(container, blob_name, expires)
        return f"{self.blob_url(container, blob_name)}?expires={expires}&signature={signature}", expires

    def verify_signature(self, container: str, blob_name: str, expires: int, signature: str, now: Optional[float] = None) -> None:
        """
        Raises:
            InvalidSignatureError: If the signature does not match or has expired
        """
        expected = self._sign(container, blob_name, expires)
        if not hmac.compare_digest(expected, signature or ""):
            raise InvalidSignatureError("Invalid URL signature")

        current = time.time() if now is None else now
        if current > expires:
            raise InvalidSignatureError("Signed URL has expired")
