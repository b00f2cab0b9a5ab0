"""
Error taxonomy for the ad batch pipeline.

Two tiers:
- BatchFatalError: the batch stops before any per-ad result exists
  (TemplateResolutionError, AdSetCreationError).
- GroupError: recorded against a single ad group; the batch moves on
  (MediaUploadError, NoMediaResolvedError, CreativeRejectedError, AdCreationError).

MetaApiError is the transport-level error raised by MetaGraphClient; services
translate it into one of the typed errors above.
"""

import json
from typing import Any, Dict, Optional


class AdLauncherError(Exception):
    """Base class for all AdLauncher errors."""


class MetaApiError(AdLauncherError):
    """Non-2xx response from the Meta Graph API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
        error_subcode: Optional[int] = None,
        error_user_msg: Optional[str] = None,
        body: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.error_subcode = error_subcode
        self.error_user_msg = error_user_msg
        self.body = body
        super().__init__(self.detail)

    @property
    def detail(self) -> str:
        """Most specific human-readable text the platform gave us."""
        return self.error_user_msg or self.message

    @classmethod
    def from_response(cls, status_code: int, text: str) -> "MetaApiError":
        """
        Build from a raw response body.

        JSON bodies shaped {"error": {...}} keep their diagnostic fields;
        anything else is wrapped verbatim.
        """
        try:
            body = json.loads(text) if text else None
        except ValueError:
            body = None

        error: Dict[str, Any] = {}
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]

        if not error:
            message = text.strip() or f"HTTP {status_code}"
            return cls(message, status_code=status_code, body=text)

        return cls(
            error.get("message") or f"HTTP {status_code}",
            status_code=status_code,
            code=error.get("code"),
            error_subcode=error.get("error_subcode"),
            error_user_msg=error.get("error_user_msg"),
            body=body,
        )


# ============================================================================
# Batch-fatal
# ============================================================================

class BatchFatalError(AdLauncherError):
    """Aborts the whole batch; no per-ad results are produced."""


class TemplateResolutionError(BatchFatalError):
    """Template ad/ad set could not be read, or carries no page id."""


class AdSetCreationError(BatchFatalError):
    """The cloned ad set could not be created."""


# ============================================================================
# Group-isolated
# ============================================================================

class GroupError(AdLauncherError):
    """Fails a single ad group; remaining groups still run."""

    step = "group"


class MediaUploadError(GroupError):
    step = "resolve_media"

    def __init__(self, detail: str, filename: Optional[str] = None):
        self.filename = filename
        if filename:
            super().__init__(f"Failed to upload {filename}: {detail}")
        else:
            super().__init__(f"Media upload failed: {detail}")


class NoMediaResolvedError(GroupError):
    step = "resolve_media"

    def __init__(self, ad_name: str):
        self.ad_name = ad_name
        super().__init__(f"No media could be resolved for ad '{ad_name}'")


class CreativeRejectedError(GroupError):
    step = "create_creative"


class AdCreationError(GroupError):
    step = "create_ad"
