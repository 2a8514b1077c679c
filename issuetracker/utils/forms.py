# issuetracker/utils/forms.py
from typing import Any, Dict, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from issuetracker.config.security import SecurityConfig
from issuetracker.utils.errors import ValidationError


async def read_payload(request: Request) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """
    Read a request body that may be JSON, urlencoded or multipart.

    Returns the plain fields and the single ``attachment`` file part, if any.
    """
    content_type = request.headers.get("content-type", "")
    field_name = SecurityConfig.FILE_UPLOAD['field_name']

    if "multipart/form-data" in content_type or "application/x-www-form-urlencoded" in content_type:
        form = await request.form()
        files = [
            item for item in form.getlist(field_name)
            if isinstance(item, UploadFile) and item.filename
        ]
        if len(files) > 1:
            raise ValidationError(f"Only one file may be uploaded under '{field_name}'")
        fields = {
            key: value for key, value in form.multi_items()
            if not isinstance(value, UploadFile)
        }
        return fields, (files[0] if files else None)

    body = await request.body()
    if not body:
        return {}, None
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data, None
