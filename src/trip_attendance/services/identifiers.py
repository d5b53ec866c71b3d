"""Identifier generation for sessions and members."""

import secrets
import string
from uuid import uuid4

SHORT_CODE_LENGTH = 8
_SHORT_CODE_ALPHABET = string.ascii_uppercase + string.digits


def new_session_short_code() -> str:
    """Return a short, shareable, uppercase alphanumeric session code."""
    return "".join(
        secrets.choice(_SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH)
    )


def new_id() -> str:
    """Return an opaque unique identifier."""
    return str(uuid4())
