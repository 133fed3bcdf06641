"""Gmail attachment lookup by contact.

Lists messages exchanged with a contact that carry attachments and
returns attachment metadata (no file bytes).
"""

import logging
import re
from typing import Any

import httpx

from cockpit.schemas.email import ContactFile
from cockpit.services.google_oauth_service import GmailAuthError

logger = logging.getLogger(__name__)

GMAIL_MESSAGES_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages"

MAX_RESULTS_PER_PAGE = 100
MAX_PAGES = 10

EXCLUDED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".ics", ".p7s")
EXCLUDED_NAME_FRAGMENTS = ("smime", "emoji")
EXCLUDED_MIME_FRAGMENTS = ("pkcs7", "signature")
EMOJI_PATTERN = re.compile("[\U0001F300-\U0001F9FF\u2600-\u26FF\u2700-\u27BF]")

OFFICE_MIME_PREFIX = "application/vnd.openxmlformats-officedocument"
DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.ms-excel",
    "application/vnd.ms-powerpoint",
    "application/zip",
    "application/x-rar-compressed",
    "application/x-7z-compressed",
}
CONTENT_DISPOSITION_FILENAME = re.compile(r'filename="?([^"]+)"?')


class GmailServiceError(Exception):
    """Gmail API call failed for a reason other than authentication."""


# =============================================================================
# Attachment filtering
# =============================================================================

def is_excluded_attachment(filename: str, mime_type: str) -> bool:
    """Inline images, calendar invites, signatures and emoji files."""
    lowered = filename.lower()
    if lowered.endswith(EXCLUDED_EXTENSIONS):
        return True
    if any(fragment in lowered for fragment in EXCLUDED_NAME_FRAGMENTS):
        return True
    if any(fragment in mime_type for fragment in EXCLUDED_MIME_FRAGMENTS):
        return True
    return bool(EMOJI_PATTERN.search(filename))


def is_supported_mime_type(mime_type: str) -> bool:
    """Documents, Office files, images, archives and text."""
    return (
        mime_type in DOCUMENT_MIME_TYPES
        or mime_type.startswith(OFFICE_MIME_PREFIX)
        or mime_type.startswith("image/")
        or mime_type.startswith("text/")
    )


def _header(headers: list[dict[str, Any]], name: str) -> str:
    wanted = name.lower()
    for header in headers:
        if (header.get("name") or "").lower() == wanted:
            return header.get("value") or ""
    return ""


def extract_contact_files(message: dict[str, Any], contact_email: str) -> list[ContactFile]:
    """
    Attachment metadata for one Gmail message (`format=full`).

    Nested parts are walked depth-first with dotted part ids ("1", "1.2").
    A message without parts whose body is itself an attachment yields one
    file with part id "root".
    """
    message_id = message.get("id") or ""
    payload = message.get("payload") or {}
    headers = payload.get("headers") or []

    subject = _header(headers, "Subject")
    sender = _header(headers, "From")
    to = _header(headers, "To")
    date = _header(headers, "Date")
    direction = "received" if contact_email.lower() in sender.lower() else "sent"
    email_to = [addr.strip() for addr in to.split(",") if addr.strip()]

    def make_file(part_id: str, attachment_id: str, filename: str, mime_type: str, size: int) -> ContactFile:
        return ContactFile(
            id=f"{message_id}-{part_id}",
            email_message_id=message_id,
            attachment_id=attachment_id,
            part_id=part_id,
            file_name=filename,
            mime_type=mime_type,
            size=size,
            direction=direction,
            email_subject=subject,
            email_date=date,
            email_from=sender,
            email_to=email_to,
        )

    files: list[ContactFile] = []

    def walk(parts: list[dict[str, Any]], prefix: str = "") -> None:
        for index, part in enumerate(parts, start=1):
            part_id = f"{prefix}.{index}" if prefix else str(index)
            filename = part.get("filename") or ""
            body = part.get("body") or {}
            mime_type = part.get("mimeType") or ""

            if filename.strip() and body.get("attachmentId"):
                if not is_excluded_attachment(filename, mime_type) and is_supported_mime_type(mime_type):
                    files.append(
                        make_file(part_id, body["attachmentId"], filename, mime_type, body.get("size") or 0)
                    )

            if part.get("parts"):
                walk(part["parts"], part_id)

    if payload.get("parts"):
        walk(payload["parts"])
    elif (payload.get("body") or {}).get("attachmentId"):
        match = CONTENT_DISPOSITION_FILENAME.search(_header(headers, "Content-Disposition"))
        filename = match.group(1) if match else ""
        mime_type = payload.get("mimeType") or ""
        if filename and is_supported_mime_type(mime_type):
            body = payload["body"]
            files.append(make_file("root", body["attachmentId"], filename, mime_type, body.get("size") or 0))

    return files


# =============================================================================
# Gmail API
# =============================================================================

def build_contact_query(contact_email: str) -> str:
    e = contact_email
    return f"(from:{e} OR to:{e} OR cc:{e} OR bcc:{e}) has:attachment"


def _raise_for_gmail_status(response: httpx.Response) -> None:
    if response.status_code == 401:
        raise GmailAuthError("Gmail authentication failed. Please reconnect your Gmail account.")
    if response.status_code >= 400:
        raise GmailServiceError(f"Failed to fetch files: Gmail API returned {response.status_code}")


async def list_message_ids(
    client: httpx.AsyncClient, access_token: str, query: str
) -> list[str]:
    """Message ids matching `query`, at most MAX_PAGES pages of MAX_RESULTS_PER_PAGE."""
    headers = {"Authorization": f"Bearer {access_token}"}
    ids: list[str] = []
    page_token: str | None = None

    while True:
        params: dict[str, Any] = {"q": query, "maxResults": MAX_RESULTS_PER_PAGE}
        if page_token:
            params["pageToken"] = page_token
        response = await client.get(GMAIL_MESSAGES_URL, headers=headers, params=params)
        _raise_for_gmail_status(response)
        data = response.json()

        ids.extend(m["id"] for m in data.get("messages") or [] if m.get("id"))
        page_token = data.get("nextPageToken")
        if not page_token or len(ids) >= MAX_PAGES * MAX_RESULTS_PER_PAGE:
            return ids


async def get_message(
    client: httpx.AsyncClient, access_token: str, message_id: str
) -> dict[str, Any]:
    response = await client.get(
        f"{GMAIL_MESSAGES_URL}/{message_id}",
        headers={"Authorization": f"Bearer {access_token}"},
        params={"format": "full"},
    )
    _raise_for_gmail_status(response)
    return response.json()


async def fetch_files_by_contact(
    access_token: str,
    contact_email: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> list[ContactFile]:
    """
    Attachments on messages sent to or received from `contact_email`.

    A message that fails to load or parse is logged and skipped.

    Raises:
        GmailAuthError: Gmail rejected the access token
        GmailServiceError: listing messages failed
    """
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=30.0)
    try:
        try:
            message_ids = await list_message_ids(http, access_token, build_contact_query(contact_email))
        except httpx.HTTPError as exc:
            raise GmailServiceError(f"Failed to fetch files: {type(exc).__name__}") from exc

        files: list[ContactFile] = []
        for message_id in message_ids:
            try:
                message = await get_message(http, access_token, message_id)
                if not message.get("payload"):
                    continue
                files.extend(extract_contact_files(message, contact_email))
            except GmailAuthError:
                raise
            except (GmailServiceError, httpx.HTTPError, ValueError, KeyError) as exc:
                logger.warning(
                    "Skipping Gmail message %s: %s", message_id, type(exc).__name__
                )
        return files
    finally:
        if owns_client:
            await http.aclose()
