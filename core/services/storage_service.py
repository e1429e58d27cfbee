# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Uploads transporter documents (license, insurance, ...) to Supabase
# Storage. Each document kind has one file per transporter; uploading again
# replaces it.
# =============================================================================

import logging
import os

from lib.supabase_client import SupabaseClient
from core.models.transporter_application import DocumentKind
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError, StorageUploadError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


class StorageService:
    """
    Service for Supabase Storage operations.

    Documents live under transporters/{user_id}/{kind}{ext} in the
    configured bucket.
    """

    @staticmethod
    def validate_document(filename: str, size: int) -> str:
        """
        Check extension and size of an uploaded document.

        Returns:
            The lower-cased extension

        Raises:
            InvalidFileTypeError: Extension not allowed
            FileTooLargeError: Over MAX_UPLOAD_SIZE_MB
        """
        allowed = settings.allowed_document_extensions_list
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in allowed:
            raise InvalidFileTypeError(filename, allowed)

        if size > settings.max_upload_size_bytes:
            raise FileTooLargeError(size / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        return ext

    @staticmethod
    def document_path(user_id: str, kind: DocumentKind, ext: str) -> str:
        return f"transporters/{user_id}/{kind.value}{ext}"

    @staticmethod
    def upload_document(
        user_id: str,
        kind: DocumentKind,
        filename: str,
        content: bytes,
    ) -> str:
        """
        Upload a transporter document.

        Args:
            user_id: Transporter's user ID
            kind: Which document this is
            filename: Original filename (for the extension)
            content: File bytes

        Returns:
            Storage path where the file was uploaded

        Raises:
            InvalidFileTypeError / FileTooLargeError: From validate_document
            StorageUploadError: If upload fails
        """
        ext = StorageService.validate_document(filename, len(content))
        path = StorageService.document_path(user_id, kind, ext)
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(settings.DOCUMENTS_BUCKET).upload(
                path=path,
                file=content,
                file_options={"content-type": CONTENT_TYPES.get(ext, "application/octet-stream"), "upsert": "true"}
            )

            logger.info(f"Uploaded document to storage: {path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def is_uploaded_document(user_id: str, kind: DocumentKind, path: str) -> bool:
        """
        Whether path is the caller's own upload of this document kind.

        The path must be the one upload_document produced for this user and
        kind, and the file must be present in the bucket.
        """
        prefix = StorageService.document_path(user_id, kind, "")
        if not path or not path.startswith(prefix):
            return False

        ext = path[len(prefix):]
        if ext not in settings.allowed_document_extensions_list:
            return False

        uploaded = {item.get("name") for item in StorageService.list_documents(user_id)}
        return f"{kind.value}{ext}" in uploaded

    @staticmethod
    def list_documents(user_id: str) -> list[dict]:
        """
        List the documents a transporter has uploaded.

        Returns:
            List of file info dicts (empty when listing fails)
        """
        client = SupabaseClient.get_client()
        path = f"transporters/{user_id}"

        try:
            response = client.storage.from_(settings.DOCUMENTS_BUCKET).list(path)
            return response or []

        except Exception as e:
            logger.error(f"Failed to list documents: {e}")
            return []
