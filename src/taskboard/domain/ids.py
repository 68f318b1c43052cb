"""ID generation and validation.

Records use opaque 20-character alphanumeric ids, the same shape as
auto-generated document ids in the store the board was migrated from.
Callers may also supply their own id (imports keep their original ids).

INVARIANT: IDs are permanent. Once assigned, an ID never changes.
"""

from __future__ import annotations

import re
import secrets
import string

ID_LENGTH = 20
_ALPHABET = string.ascii_letters + string.digits

ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def generate_id() -> str:
    """Return a new random 20-character alphanumeric id."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(ID_LENGTH))


def validate_id(record_id: str) -> bool:
    """Check whether *record_id* is an acceptable custom id."""
    return ID_PATTERN.match(record_id) is not None
