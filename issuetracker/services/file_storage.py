# issuetracker/services/file_storage.py
import os
import uuid
import shutil
import mimetypes
from pathlib import Path
from typing import Optional
from fastapi import UploadFile
import logging

from issuetracker.config.security import SecurityConfig
from issuetracker.utils.errors import ValidationError, ServerError

logger = logging.getLogger(__name__)

# Upload policy per call site: which MIME types are accepted and how large a
# file may be. None for mime_types means any type is accepted.
UPLOAD_POLICIES = {
    "issue": {
        "mime_types": SecurityConfig.FILE_UPLOAD['image_mime_types'],
        "max_file_size": SecurityConfig.FILE_UPLOAD['max_file_size'],
    },
    "conversation": {
        "mime_types": None,
        "max_file_size": SecurityConfig.FILE_UPLOAD['max_file_size'],
    },
}


class FileStorageService:
    """Service for storing uploaded attachments and resolving them for download"""

    def __init__(self, upload_dir: str = None):
        self.upload_dir = Path(upload_dir or SecurityConfig.STORAGE['upload_dir'])

    def ensure_upload_dir(self) -> Path:
        """Create the upload directory if it doesn't exist"""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir

    def validate_file(self, file: UploadFile, policy: str) -> str:
        """
        Check an upload against the policy of its call site.

        Returns the resolved MIME type; raises ValidationError when rejected.
        """
        rules = UPLOAD_POLICIES[policy]

        if not file.filename:
            raise ValidationError("File must have a filename")

        size = getattr(file, 'size', None)
        if size and size > rules['max_file_size']:
            raise ValidationError(
                f"File size exceeds maximum allowed size of {rules['max_file_size'] / (1024*1024):.1f}MB"
            )

        mime_type = file.content_type or mimetypes.guess_type(file.filename)[0] or "application/octet-stream"
        if rules['mime_types'] is not None and mime_type.lower() not in rules['mime_types']:
            raise ValidationError("Invalid file type. Only images are allowed.")

        return mime_type

    def generate_unique_filename(self, original_filename: str) -> str:
        """UUID-based stored name keeping the original extension"""
        file_ext = Path(original_filename).suffix.lower()
        return f"{uuid.uuid4().hex}{file_ext}"

    def save_file(self, file: UploadFile, policy: str) -> str:
        """
        Validate and persist an upload.

        Args:
            file: the multipart ``attachment`` part
            policy: key into UPLOAD_POLICIES for the calling endpoint

        Returns:
            The stored filename to record on the issue or message
        """
        self.validate_file(file, policy)
        self.ensure_upload_dir()

        filename = self.generate_unique_filename(file.filename)
        file_path = self.upload_dir / filename

        try:
            with open(file_path, "wb") as buffer:
                shutil.copyfileobj(file.file, buffer)
        except OSError as e:
            logger.error(f"Error saving file {file.filename}: {str(e)}")
            self.delete_file(filename)
            raise ServerError("Error saving file")

        # Size is not always known up front for streamed parts
        max_size = UPLOAD_POLICIES[policy]['max_file_size']
        if file_path.stat().st_size > max_size:
            self.delete_file(filename)
            raise ValidationError(
                f"File size exceeds maximum allowed size of {max_size / (1024*1024):.1f}MB"
            )

        logger.info(f"File saved successfully: {file_path}")
        return filename

    def delete_file(self, filename: str) -> bool:
        """Remove a stored file; returns False if it was not there"""
        path = self.upload_dir / filename
        try:
            if path.exists():
                path.unlink()
                logger.info(f"File deleted successfully: {path}")
                return True
            logger.warning(f"File not found for deletion: {path}")
            return False
        except OSError as e:
            logger.error(f"Error deleting file {path}: {str(e)}")
            return False

    def get_file_path(self, filename: str) -> Optional[str]:
        """
        Resolve a stored filename to a path inside the upload directory.

        Returns None if the name escapes the directory or the file is missing.
        """
        base = self.upload_dir.resolve()
        path = (base / filename).resolve()
        if os.path.commonpath([str(base), str(path)]) != str(base):
            logger.warning(f"Rejected attachment path outside upload dir: {filename}")
            return None
        return str(path) if path.is_file() else None


# Global instance
file_storage = FileStorageService()
