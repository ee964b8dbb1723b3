"""String checks shared by domain models."""

import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_email(value: str | None) -> bool:
    """Return True when the value looks like an email address.

    Author names coming from the identity provider sometimes default to the
    account email; those must never be shown publicly.
    """
    if not value:
        return False
    return _EMAIL_RE.match(value.strip()) is not None

