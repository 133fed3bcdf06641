"""Email router - Gmail attachments exchanged with a contact."""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.core.encryption import ConfigurationError
from cockpit.core.structured_logging import build_log_context
from cockpit.schemas.email import ContactFilesResponse
from cockpit.services import gmail_service, google_oauth_service
from cockpit.services.google_oauth_service import GmailAuthError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=api_dependencies)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/files-by-contact")
async def files_by_contact(
    email: str | None = None,
    user_email: str | None = Query(default=None, alias="userEmail"),
    db: Session = Depends(get_db),
):
    """
    Attachments on Gmail messages to/from a contact.

    Errors use a flat `{"error": ...}` body:
    400 contact email missing, 401 user email missing, Gmail not connected
    or rejected, 500 anything else.
    """
    if not email or not email.strip():
        return _error(400, "Contact email is required")
    if not user_email or not user_email.strip():
        return _error(401, "User email is required")

    contact_email = email.strip()
    try:
        access_token = await google_oauth_service.get_access_token(db, user_email.strip())
        if not access_token:
            return _error(401, "Gmail not connected. Please connect your Gmail account first.")

        files = await gmail_service.fetch_files_by_contact(access_token, contact_email)
    except GmailAuthError as e:
        logger.warning("Gmail authentication failed for files-by-contact")
        return _error(401, str(e))
    except ConfigurationError:
        logger.warning("Google OAuth not configured")
        return _error(500, "Internal server error")
    except Exception:
        logger.exception(
            "Failed to fetch files by contact",
            extra=build_log_context(user_email=user_email, route="/api/email/files-by-contact"),
        )
        return _error(500, "Internal server error")

    return ContactFilesResponse(files=files).model_dump(by_alias=True)
