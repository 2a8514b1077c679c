# issuetracker/utils/validation.py
"""
Fixed value sets and the write-rule table consulted by every write path.

Each write operation names the fields it requires and the fields whose values
must come from a fixed set. Operations that deliberately accept any value for
a field (user create/update accepting any role, issue patch accepting any
status) list that field under ``unchecked``; an unchecked field is never held
to a fixed set even when one is registered for it. Fields that may be
omitted but never set to null are listed under ``not_null``.
"""

from typing import Any, Dict, Mapping

from issuetracker.utils.errors import ValidationError

ROLES = ["User", "IT User", "Infrastructure User", "Administrator User"]

ISSUE_TYPES = ["it", "student", "infrastructure"]

# Ordered lifecycle of an issue
ISSUE_STATUSES = [
    "open",
    "allocated",
    "work in progress",
    "submitted back to owner",
    "closed",
]

STATUS_ALLOCATED = "allocated"
STATUS_CLOSED = "closed"

WRITE_RULES: Dict[str, Dict[str, Any]] = {
    "register": {
        "required": ("username", "email", "password", "role"),
        "message": "username, email, password & role are required",
        "choices": {"role": ROLES},
        "unchecked": (),
    },
    "user_create": {
        "required": ("tenant_id", "username", "email", "password", "role"),
        "message": "tenant_id, username, email, password and role are required",
        "choices": {},
        "unchecked": ("role",),
    },
    "user_update": {
        "required": ("tenant_id", "username", "email", "role"),
        "message": "tenant_id, username, email and role are required",
        "choices": {},
        "unchecked": ("role",),
    },
    "issue_create": {
        "required": ("user_id", "title", "description", "issue_type", "status"),
        "message": "user_id, title, description, issue_type and status are required",
        "choices": {"issue_type": ISSUE_TYPES, "status": ISSUE_STATUSES},
        "unchecked": (),
    },
    "issue_patch": {
        "required": (),
        "message": "",
        "choices": {},
        "unchecked": ("status", "assignee_id"),
        "not_null": ("description", "status"),
    },
}


def is_blank(value: Any) -> bool:
    """A value is blank when absent or an all-whitespace string"""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def check_write(operation: str, values: Mapping[str, Any]) -> None:
    """Validate ``values`` against the rules registered for ``operation``.

    Raises ValidationError on the first missing field, explicit null on a
    non-nullable field, or out-of-set value.
    """
    rules = WRITE_RULES[operation]
    unchecked = set(rules["unchecked"])

    if any(is_blank(values.get(field)) for field in rules["required"]):
        raise ValidationError(rules["message"])

    for field in rules.get("not_null", ()):
        if field in values and values[field] is None:
            raise ValidationError(f"{field} cannot be null")

    for field, allowed in rules["choices"].items():
        if field in unchecked:
            continue
        value = values.get(field)
        if value not in allowed:
            if field == "role":
                raise ValidationError(f"Invalid role: {value}")
            raise ValidationError(f"Invalid {field}, must be one of: {', '.join(allowed)}")


def parse_int(value: Any, message: str) -> int:
    """Coerce a header/form value to int, raising ValidationError otherwise"""
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message)
