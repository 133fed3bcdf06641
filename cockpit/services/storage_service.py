"""File storage for uploaded documents (local directory or S3-compatible bucket)."""

from __future__ import annotations

import logging
import os
import secrets
import string
import time
from dataclasses import dataclass
from typing import BinaryIO

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from cockpit.core.config import settings

logger = logging.getLogger(__name__)

_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


@dataclass
class UploadResult:
    url: str
    path: str
    error: str | None = None


def get_s3_client() -> BaseClient:
    """Return a configured S3 client (supports S3-compatible endpoints)."""
    endpoint = settings.S3_ENDPOINT_URL.rstrip("/") if settings.S3_ENDPOINT_URL else None
    return boto3.client(
        "s3",
        region_name=settings.S3_REGION or None,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        endpoint_url=endpoint,
    )


def _get_local_storage_path() -> str:
    path = settings.LOCAL_STORAGE_PATH
    os.makedirs(path, exist_ok=True)
    return path


def build_storage_path(filename: str, folder: str = "documents") -> str:
    """`<folder>/<epoch ms>-<random>.<ext>`; the original name is not kept."""
    ext = filename.rsplit(".", 1)[-1] if "." in filename else filename
    token = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(6))
    return f"{folder}/{int(time.time() * 1000)}-{token}.{ext}"


def get_public_url(path: str) -> str:
    if settings.STORAGE_PUBLIC_BASE_URL:
        return f"{settings.STORAGE_PUBLIC_BASE_URL.rstrip('/')}/{path}"
    if settings.STORAGE_BACKEND == "s3":
        if settings.S3_ENDPOINT_URL:
            return f"{settings.S3_ENDPOINT_URL.rstrip('/')}/{settings.STORAGE_BUCKET}/{path}"
        return f"https://{settings.STORAGE_BUCKET}.s3.amazonaws.com/{path}"
    return f"file://{os.path.join(settings.LOCAL_STORAGE_PATH, path)}"


def _describe_s3_error(exc: ClientError) -> str:
    code = exc.response.get("Error", {}).get("Code", "")
    if code in ("NoSuchBucket", "404"):
        return f'Bucket "{settings.STORAGE_BUCKET}" not found. Create it and make it public.'
    if code in ("AccessDenied", "403"):
        return f'Permission denied for bucket "{settings.STORAGE_BUCKET}".'
    return exc.response.get("Error", {}).get("Message") or str(exc)


def upload_file(
    filename: str,
    content_type: str | None,
    file: BinaryIO,
    folder: str = "documents",
) -> UploadResult:
    """
    Store a file and return its public URL.

    Failures are reported in `UploadResult.error`, never raised.
    """
    path = build_storage_path(filename, folder)
    try:
        file.seek(0)
        if settings.STORAGE_BACKEND == "s3":
            extra = {"CacheControl": "max-age=3600"}
            if content_type:
                extra["ContentType"] = content_type
            get_s3_client().upload_fileobj(file, settings.STORAGE_BUCKET, path, ExtraArgs=extra)
        else:
            target = os.path.join(_get_local_storage_path(), path)
            os.makedirs(os.path.dirname(target), exist_ok=True)
            if os.path.exists(target):
                return UploadResult(url="", path="", error="File with this name already exists. Please try again.")
            with open(target, "wb") as f:
                f.write(file.read())
    except ClientError as exc:
        logger.error("Storage upload failed: %s", exc)
        return UploadResult(url="", path="", error=_describe_s3_error(exc))
    except (BotoCoreError, OSError) as exc:
        logger.error("Storage upload failed: %s", exc)
        return UploadResult(url="", path="", error=str(exc) or "Upload failed")

    return UploadResult(url=get_public_url(path), path=path)


def get_file_type(filename: str, content_type: str | None) -> str:
    """Coarse file type from MIME type, falling back to the extension."""
    mime = (content_type or "").lower()
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    if "pdf" in mime:
        return "pdf"
    # Office MIME types all contain "officedocument": spreadsheet first
    if "excel" in mime or "spreadsheet" in mime:
        return "xlsx"
    if "word" in mime or "document" in mime:
        return "docx"
    if "image" in mime:
        return "image"
    if ext:
        return ext
    return "unknown"
