import logging
import mimetypes
import os
import time
from datetime import datetime, timedelta, timezone
from urllib.parse import quote
from uuid import uuid4

import jwt
from werkzeug.utils import secure_filename

from printshop.application.ports import ObjectStorage, StoredObject
from printshop.domain.errors import NotFoundError, StorageError, UnauthorizedError

logger = logging.getLogger(__name__)


class LocalObjectStorage(ObjectStorage):
    """Object storage on the local filesystem.

    Presigned read URLs carry a short-lived token signed with ``secret`` and
    bound to the object key; they are served by ``GET /api/v1/files/raw/{key}``.
    """

    def __init__(self, root_dir: str, public_base_url: str, secret: str):
        self.root_dir = root_dir
        self.public_base_url = public_base_url.rstrip("/")
        self.secret = secret
        os.makedirs(self.root_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        safe_key = secure_filename(key)
        if not safe_key or safe_key != key:
            raise NotFoundError("File not found")
        return os.path.join(self.root_dir, safe_key)

    def put(self, data: bytes, content_type: str, filename: str) -> StoredObject:
        original_filename = secure_filename(filename) or "upload"
        key = f"{int(time.time() * 1000)}-{uuid4().hex}-{original_filename}"
        try:
            with open(os.path.join(self.root_dir, key), "wb") as fh:
                fh.write(data)
        except OSError as e:
            logger.error("Failed to store object %s: %s", key, e)
            raise StorageError("Failed to upload file") from e
        logger.info("Stored object %s (%d bytes)", key, len(data))
        return StoredObject(key=key, size=len(data), type=content_type or "application/octet-stream")

    def delete(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            logger.warning("Object %s was already gone", key)
        except (OSError, NotFoundError) as e:
            logger.error("Failed to delete object %s: %s", key, e)
            raise StorageError("File deletion failed") from e

    def presigned_url(self, key: str, ttl_seconds: int) -> str:
        token = jwt.encode(
            {"key": key, "exp": datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)},
            self.secret,
            algorithm="HS256",
        )
        return f"{self.public_base_url}/api/v1/files/raw/{quote(key)}?token={token}"

    def read_signed(self, key: str, token: str) -> tuple[bytes, str]:
        try:
            claims = jwt.decode(token, self.secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError("Invalid or expired file link") from e
        if claims.get("key") != key:
            raise UnauthorizedError("Invalid or expired file link")
        try:
            with open(self._path(key), "rb") as fh:
                data = fh.read()
        except FileNotFoundError as e:
            raise NotFoundError("File not found") from e
        except OSError as e:
            raise StorageError("File retrieval failed") from e
        content_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
        return data, content_type
