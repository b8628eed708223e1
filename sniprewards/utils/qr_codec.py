"""
QR payload codec.

A salon's QR code carries an absolute URL of the form
``<origin>/scan/<owner_id>``. Scanning it hands the owner identity to the
check-in flow; whether that owner actually has a salon is checked later.
"""

from urllib.parse import quote, unquote, urlparse

from flask import current_app, has_app_context

from sniprewards.exceptions import DecodeError

SCAN_PATH = "scan"
DEFAULT_ORIGIN = "http://localhost:3000"


def _default_origin() -> str:
    if has_app_context():
        return current_app.config.get("FRONTEND_URL") or DEFAULT_ORIGIN
    return DEFAULT_ORIGIN


def encode(owner_id: str, origin: str | None = None) -> str:
    """Build the check-in URL for ``owner_id``."""
    if not owner_id:
        raise ValueError("owner_id is required")
    origin = (origin or _default_origin()).rstrip("/")
    return f"{origin}/{SCAN_PATH}/{quote(owner_id, safe='')}"


def decode(payload) -> str:
    """
    Recover the owner identity from a scanned payload.

    Raises:
        DecodeError(MALFORMED): payload is not an absolute URL
        DecodeError(MISSING_SEGMENT): the path has no final non-empty segment
    """
    if not isinstance(payload, str):
        raise DecodeError(DecodeError.MALFORMED, payload=payload)

    payload = payload.strip()
    try:
        parsed = urlparse(payload)
    except ValueError:
        raise DecodeError(DecodeError.MALFORMED, payload=payload)

    if not parsed.scheme or not parsed.netloc or any(c.isspace() for c in payload):
        raise DecodeError(DecodeError.MALFORMED, payload=payload)

    segment = parsed.path.split("/")[-1]
    if not segment:
        raise DecodeError(DecodeError.MISSING_SEGMENT, payload=payload)

    return unquote(segment)
