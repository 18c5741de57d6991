from typing import Any


def normalize_identity(identity: Any) -> str:
    """Addresses compare case-insensitively; None and non-strings become ''."""
    if not isinstance(identity, str):
        return ""
    return identity.strip().lower()


def format_address(address: str | None) -> str:
    if not address:
        return ""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"
