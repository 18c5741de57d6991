from typing import Any, List

ADDRESS_PREFIX = "0x"


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_address(v: Any) -> bool:
    if not _is_non_empty_str(v):
        return False
    v = v.strip()
    if not v.lower().startswith(ADDRESS_PREFIX) or len(v) <= len(ADDRESS_PREFIX):
        return False
    try:
        int(v[2:], 16)
    except ValueError:
        return False
    return True


def validate_user(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    A user without a display name is valid here; ranking filters it out.
    """
    if not isinstance(data, dict):
        return ["User record must be an object"]
    errors: List[str] = []
    if not _valid_address(data.get("address")):
        errors.append("Field 'address' must be a hex address (0x...)")
    for f in ("displayName", "bio"):
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")
    return errors


def validate_follow(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return ["Follow record must be an object"]
    errors: List[str] = []
    for f in ("follower", "following"):
        if not _valid_address(data.get(f)):
            errors.append(f"Field '{f}' must be a hex address (0x...)")
    return errors


def validate_post(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return ["Post record must be an object"]
    errors: List[str] = []
    if not _valid_address(data.get("author")):
        errors.append("Field 'author' must be a hex address (0x...)")
    if "content" in data and not isinstance(data["content"], str):
        errors.append("Field 'content' must be a string if provided")
    ts = data.get("timestamp")
    if ts is not None and (isinstance(ts, bool) or not isinstance(ts, (int, float))):
        errors.append("Field 'timestamp' must be seconds since epoch")
    likes = data.get("likes")
    if likes is not None:
        if not isinstance(likes, list):
            errors.append("Field 'likes' must be a list of addresses")
        elif not all(_valid_address(l) for l in likes):
            errors.append("Field 'likes' contains an invalid address")
    return errors


def validate_snapshot(data: Any) -> List[str]:
    """Validate a {users, follows, posts} snapshot; errors are prefixed with their location."""
    if not isinstance(data, dict):
        return ["Snapshot must be an object with users, follows and posts"]
    errors: List[str] = []
    validators = {"users": validate_user, "follows": validate_follow, "posts": validate_post}
    for section, validate in validators.items():
        records = data.get(section, [])
        if not isinstance(records, list):
            errors.append(f"Section '{section}' must be a list")
            continue
        for i, record in enumerate(records):
            errors.extend(f"{section}[{i}]: {e}" for e in validate(record))
    return errors
