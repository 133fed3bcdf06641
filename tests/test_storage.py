"""Tests for the storage service (local backend, URLs, file types, S3 errors)."""

import io
import os
import re

from botocore.exceptions import ClientError

from cockpit.core.config import settings
from cockpit.services import storage_service


def test_build_storage_path_format():
    path = storage_service.build_storage_path("Contract Final.PDF", folder="documents")
    assert re.fullmatch(r"documents/\d{13}-[a-z0-9]{6}\.PDF", path)


def test_public_url_prefers_configured_base(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_PUBLIC_BASE_URL", "https://cdn.example.com/")
    assert storage_service.get_public_url("documents/a.pdf") == "https://cdn.example.com/documents/a.pdf"


def test_public_url_from_s3_endpoint(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_PUBLIC_BASE_URL", "")
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "s3")
    monkeypatch.setattr(settings, "S3_ENDPOINT_URL", "https://storage.example.com/")
    monkeypatch.setattr(settings, "STORAGE_BUCKET", "mb-cockpit")
    assert (
        storage_service.get_public_url("documents/a.pdf")
        == "https://storage.example.com/mb-cockpit/documents/a.pdf"
    )


def test_local_upload_writes_file(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "local")
    monkeypatch.setattr(settings, "STORAGE_PUBLIC_BASE_URL", "")
    monkeypatch.setattr(settings, "LOCAL_STORAGE_PATH", str(tmp_path))

    result = storage_service.upload_file("notes.txt", "text/plain", io.BytesIO(b"hello"))

    assert result.error is None
    assert result.path.startswith("documents/")
    assert result.url.startswith("file://")
    with open(os.path.join(tmp_path, result.path), "rb") as f:
        assert f.read() == b"hello"


def test_s3_error_reported_not_raised(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "s3")

    class FailingClient:
        def upload_fileobj(self, *args, **kwargs):
            raise ClientError({"Error": {"Code": "NoSuchBucket", "Message": "nope"}}, "PutObject")

    monkeypatch.setattr(storage_service, "get_s3_client", lambda: FailingClient())

    result = storage_service.upload_file("a.pdf", "application/pdf", io.BytesIO(b"%PDF"))

    assert result.url == ""
    assert "not found" in result.error


def test_get_file_type():
    assert storage_service.get_file_type("a.pdf", "application/pdf") == "pdf"
    assert storage_service.get_file_type("a.docx", "application/msword") == "docx"
    assert (
        storage_service.get_file_type(
            "a.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        == "xlsx"
    )
    assert storage_service.get_file_type("a.png", "image/png") == "image"
    assert storage_service.get_file_type("archive.zip", "application/zip") == "zip"
    assert storage_service.get_file_type("README", None) == "unknown"
