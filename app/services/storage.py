"""
Object storage for uploaded assets (images, audio, other files).

Keys look like ``images/1700000000000-my_photo.jpg``: a folder chosen by
file extension, the upload time in epoch ms, and the sanitized file name.
Public URLs are built from R2_PUBLIC_DOMAIN.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Optional, Protocol, Tuple

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core import clock
from app.core.config import settings
from app.core.errors import ConfigError, StoreError

logger = structlog.get_logger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "svg", "bmp"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "m4a", "aac", "flac", "webm"})

IMAGES_FOLDER = "images/"
AUDIOS_FOLDER = "audios/"
OTHERS_FOLDER = "others/"

UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class ObjectStore(Protocol):
    """Defines the operations the API needs from object storage."""

    def put(self, key: str, body: BinaryIO, content_type: str) -> None:
        ...


@dataclass
class InMemoryObjectStore:
    """Test double and local-development store."""

    objects: Dict[str, Tuple[bytes, str]] = field(default_factory=dict)

    def put(self, key: str, body: BinaryIO, content_type: str) -> None:
        self.objects[key] = (body.read(), content_type)


@dataclass
class S3ObjectStore:
    """
    S3-compatible storage client (Cloudflare R2, MinIO, AWS S3).
    """

    bucket: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    region: str = "auto"

    def __post_init__(self):
        config = Config(signature_version="s3v4")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def put(self, key: str, body: BinaryIO, content_type: str) -> None:
        # upload_fileobj streams in parts instead of buffering the whole file
        self._client.upload_fileobj(
            body,
            self.bucket,
            key,
            ExtraArgs={"ContentType": content_type},
        )


_object_store: Optional[ObjectStore] = None


def get_object_store() -> ObjectStore:
    """Return the process-wide store selected by STORAGE_BACKEND."""
    global _object_store
    if _object_store:
        return _object_store

    if settings.STORAGE_BACKEND == "memory":
        _object_store = InMemoryObjectStore()
    else:
        _object_store = S3ObjectStore(
            bucket=settings.R2_BUCKET,
            endpoint=settings.R2_ENDPOINT_URL,
            access_key_id=settings.R2_ACCESS_KEY_ID,
            secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        )
    return _object_store


def classify_folder(filename: str) -> str:
    """Pick the destination folder from the (case-insensitive) extension."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext in IMAGE_EXTENSIONS:
        return IMAGES_FOLDER
    if ext in AUDIO_EXTENSIONS:
        return AUDIOS_FOLDER
    return OTHERS_FOLDER


def sanitize_filename(filename: str) -> str:
    return UNSAFE_FILENAME_CHARS.sub("_", filename)


def build_object_key(filename: str, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = clock.now_ms()
    return f"{classify_folder(filename)}{timestamp_ms}-{sanitize_filename(filename)}"


def public_url(key: str, public_domain: Optional[str] = None) -> str:
    """Join the configured public domain and key. Raises ConfigError if unset."""
    domain = settings.R2_PUBLIC_DOMAIN if public_domain is None else public_domain
    if not domain:
        raise ConfigError("R2_PUBLIC_DOMAIN not configured")
    return f"{domain.rstrip('/')}/{key}"


def upload_file(
    store: ObjectStore,
    filename: str,
    body: BinaryIO,
    content_type: Optional[str] = None,
    public_domain: Optional[str] = None,
) -> str:
    """
    Store an uploaded file and return its public URL.

    The public domain is resolved before anything is written so a
    misconfigured deployment leaves no orphaned objects behind.
    """
    key = build_object_key(filename)
    url = public_url(key, public_domain)

    try:
        store.put(key, body, content_type or DEFAULT_CONTENT_TYPE)
    except (BotoCoreError, ClientError) as e:
        logger.error("Object store upload failed", key=key, error=str(e))
        raise StoreError(str(e)) from e

    logger.info("File uploaded", key=key, content_type=content_type)
    return url
