"""Tests for Gmail attachment extraction and Google credential storage."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy import text

from cockpit.core.config import settings
from cockpit.services import gmail_service, google_oauth_service
from cockpit.services.google_oauth_service import GmailAuthError


def _message(parts, sender="Ada <ada@acme.io>", to="me@mb.io, cfo@mb.io"):
    return {
        "id": "m1",
        "payload": {
            "headers": [
                {"name": "Subject", "value": "Contract"},
                {"name": "From", "value": sender},
                {"name": "To", "value": to},
                {"name": "Date", "value": "Mon, 3 Mar 2025 10:00:00 +0000"},
            ],
            "parts": parts,
        },
    }


def _attachment(filename, mime_type, attachment_id="att", size=10):
    return {"filename": filename, "mimeType": mime_type, "body": {"attachmentId": attachment_id, "size": size}}


# =============================================================================
# Attachment extraction
# =============================================================================

def test_extract_files_with_nested_parts():
    message = _message([
        {"mimeType": "text/plain", "filename": "", "body": {"size": 5}},
        {
            "mimeType": "multipart/mixed",
            "filename": "",
            "body": {},
            "parts": [
                {"mimeType": "text/html", "filename": "", "body": {}},
                _attachment("contract.pdf", "application/pdf", "a1", 2048),
            ],
        },
    ])

    files = gmail_service.extract_contact_files(message, "ada@acme.io")

    assert len(files) == 1
    file = files[0]
    assert file.id == "m1-2.2"
    assert file.part_id == "2.2"
    assert file.attachment_id == "a1"
    assert file.size == 2048
    assert file.direction == "received"
    assert file.email_to == ["me@mb.io", "cfo@mb.io"]
    assert file.email_subject == "Contract"


def test_excluded_and_unsupported_attachments_skipped():
    message = _message([
        _attachment("logo.png", "image/png"),
        _attachment("invite.ics", "text/calendar"),
        _attachment("smime.p7s", "application/pkcs7-signature"),
        _attachment("binary.exe", "application/octet-stream"),
        _attachment("budget.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    ])

    files = gmail_service.extract_contact_files(message, "ada@acme.io")

    assert [f.file_name for f in files] == ["budget.xlsx"]
    assert files[0].part_id == "5"


def test_sent_direction_when_contact_not_sender():
    message = _message([_attachment("a.pdf", "application/pdf")], sender="me@mb.io", to="ada@acme.io")
    assert gmail_service.extract_contact_files(message, "ADA@acme.io")[0].direction == "sent"


def test_root_attachment_uses_content_disposition():
    message = {
        "id": "m2",
        "payload": {
            "mimeType": "application/pdf",
            "headers": [
                {"name": "From", "value": "ada@acme.io"},
                {"name": "Content-Disposition", "value": 'attachment; filename="scan.pdf"'},
            ],
            "body": {"attachmentId": "root-att", "size": 99},
        },
    }

    files = gmail_service.extract_contact_files(message, "ada@acme.io")

    assert [(f.id, f.file_name, f.part_id) for f in files] == [("m2-root", "scan.pdf", "root")]


def test_contact_query():
    assert gmail_service.build_contact_query("a@b.c") == (
        "(from:a@b.c OR to:a@b.c OR cc:a@b.c OR bcc:a@b.c) has:attachment"
    )


# =============================================================================
# Gmail API calls
# =============================================================================

@pytest.mark.asyncio
async def test_fetch_files_pages_and_skips_broken_messages():
    seen_auth = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_auth.append(request.headers["Authorization"])
        path = request.url.path
        if path.endswith("/messages"):
            if request.url.params.get("pageToken") == "p2":
                return httpx.Response(200, json={"messages": [{"id": "m3"}]})
            return httpx.Response(200, json={"messages": [{"id": "m1"}, {"id": "m2"}], "nextPageToken": "p2"})
        if path.endswith("/m1"):
            return httpx.Response(200, json=_message([_attachment("a.pdf", "application/pdf")]))
        if path.endswith("/m2"):
            return httpx.Response(500, json={})
        return httpx.Response(200, json={"id": "m3"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        files = await gmail_service.fetch_files_by_contact("tok", "ada@acme.io", client=client)

    assert [f.id for f in files] == ["m1-1"]
    assert set(seen_auth) == {"Bearer tok"}


@pytest.mark.asyncio
async def test_fetch_files_unauthorized_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={}))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(GmailAuthError, match="reconnect your Gmail account"):
            await gmail_service.fetch_files_by_contact("bad", "ada@acme.io", client=client)


# =============================================================================
# Credentials
# =============================================================================

def test_store_tokens_requires_all_fields(db):
    with pytest.raises(ValueError):
        google_oauth_service.store_tokens(
            db, "me@mb.io", access_token="a", refresh_token=None, expiry_date=datetime.now(timezone.utc)
        )


def test_tokens_encrypted_at_rest(db):
    google_oauth_service.store_tokens(
        db,
        "me@mb.io",
        access_token="access-123",
        refresh_token="refresh-456",
        expiry_date=datetime.now(timezone.utc) + timedelta(hours=1),
    )

    raw = db.execute(text("SELECT access_token, refresh_token FROM gmail_credentials")).one()
    assert raw[0].startswith("enc:")
    assert "access-123" not in raw[0]
    assert raw[1].startswith("enc:")

    assert google_oauth_service.get_credential(db, "me@mb.io").access_token == "access-123"
    assert google_oauth_service.is_connected(db, "me@mb.io")


@pytest.mark.asyncio
async def test_expired_token_refreshed(db, monkeypatch):
    google_oauth_service.store_tokens(
        db,
        "me@mb.io",
        access_token="old",
        refresh_token="refresh",
        expiry_date=datetime.now(timezone.utc) - timedelta(minutes=1),
    )

    async def fake_refresh(refresh_token):
        assert refresh_token == "refresh"
        return {"access_token": "new", "expires_in": 3600}

    monkeypatch.setattr(google_oauth_service, "refresh_access_token", fake_refresh)

    assert await google_oauth_service.get_access_token(db, "me@mb.io") == "new"
    credential = google_oauth_service.get_credential(db, "me@mb.io")
    assert credential.access_token == "new"
    assert credential.refresh_token == "refresh"


@pytest.mark.asyncio
async def test_failed_refresh_raises(db, monkeypatch):
    google_oauth_service.store_tokens(
        db,
        "me@mb.io",
        access_token="old",
        refresh_token="refresh",
        expiry_date=datetime.now(timezone.utc) - timedelta(minutes=1),
    )

    async def fake_refresh(refresh_token):
        return None

    monkeypatch.setattr(google_oauth_service, "refresh_access_token", fake_refresh)

    with pytest.raises(GmailAuthError):
        await google_oauth_service.get_access_token(db, "me@mb.io")


@pytest.mark.asyncio
async def test_unknown_user_has_no_token(db):
    assert await google_oauth_service.get_access_token(db, "nobody@mb.io") is None


# =============================================================================
# Gmail router
# =============================================================================

@pytest.mark.asyncio
async def test_check_connection_and_disconnect(authed_client, db):
    google_oauth_service.store_tokens(
        db,
        "me@mb.io",
        access_token="a",
        refresh_token="r",
        expiry_date=datetime.now(timezone.utc) + timedelta(hours=1),
    )

    response = await authed_client.get("/api/gmail/check-connection", params={"userEmail": "me@mb.io"})
    assert response.json() == {"connected": True}

    response = await authed_client.post("/api/gmail/disconnect", json={"user_email": "me@mb.io"})
    assert response.json() == {"ok": True, "removed": True}

    response = await authed_client.get("/api/gmail/check-connection", params={"userEmail": "me@mb.io"})
    assert response.json() == {"connected": False}


@pytest.mark.asyncio
async def test_auth_url_unconfigured_is_503(authed_client, monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")
    response = await authed_client.get("/api/gmail/auth", params={"userEmail": "me@mb.io"})
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_callback_redirects_with_error(client):
    response = await client.get("/api/gmail/callback", params={"error": "access_denied"})
    assert response.status_code == 302
    assert response.headers["location"].endswith("/?gmail=error&reason=access_denied")
