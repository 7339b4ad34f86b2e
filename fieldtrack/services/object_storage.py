import logging
import os
from pathlib import Path
from typing import Optional

from fieldtrack.core.config import storage_public_url, storage_root

logger = logging.getLogger(__name__)

JOB_FILES_BUCKET = "job-files"


class LocalObjectStorage:
    """Bucket/path blob store on the local filesystem."""

    def __init__(self, root: Optional[str] = None, public_url: Optional[str] = None) -> None:
        self.root = Path(root or storage_root()).resolve()
        self.public_url = (public_url if public_url is not None else storage_public_url()).rstrip("/")

    def _resolve(self, bucket: str, path: str) -> Path:
        target = (self.root / bucket / path).resolve()
        if self.root not in target.parents:
            raise ValueError(f"Invalid object path: {path}")
        return target

    def upload(self, bucket: str, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self._resolve(bucket, path)
        os.makedirs(target.parent, exist_ok=True)
        with open(target, "wb") as fh:
            fh.write(data)
        logger.info(
            "Object uploaded",
            extra={"bucket": bucket, "path": path, "bytes": len(data), "content_type": content_type},
        )
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_url}/{bucket}/{path}"


def get_object_storage() -> LocalObjectStorage:
    return LocalObjectStorage()
