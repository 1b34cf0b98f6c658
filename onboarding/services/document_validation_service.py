"""
Validation for uploaded onboarding documents.

Checks size, extension and the real content type (sniffed with libmagic)
and refuses files whose content does not match their extension.
"""
from typing import Optional, Tuple
from fastapi import UploadFile, HTTPException, status
import magic
import logging

logger = logging.getLogger(__name__)


class DocumentValidationService:
    """Service for validating uploaded identity and education documents."""

    ALLOWED_MIME_TYPES = {
        "application/pdf",
        "image/jpeg",
        "image/png",
    }

    ALLOWED_EXTENSIONS = {".pdf", ".jpg", ".jpeg", ".png"}

    EXTENSION_TO_MIME = {
        ".pdf": "application/pdf",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
    }

    MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

    async def validate_document(self, file: UploadFile) -> Tuple[bytes, str]:
        """
        Validate an uploaded document and return its bytes.

        Args:
            file: The uploaded file

        Returns:
            Tuple of (file content, detected MIME type)

        Raises:
            HTTPException 400: If any check fails
        """
        if not file or not file.filename:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No file provided"
            )

        extension = self._get_file_extension(file.filename)
        if extension not in self.ALLOWED_EXTENSIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid file type. Allowed: PDF, JPEG, PNG"
            )

        content = await file.read()

        if len(content) == 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="File is empty"
            )

        if len(content) > self.MAX_FILE_SIZE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large. Maximum size: {self.MAX_FILE_SIZE // (1024 * 1024)}MB"
            )

        mime_type = self._detect_mime_type(content)

        if mime_type not in self.ALLOWED_MIME_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid file type: {mime_type}. Allowed: PDF, JPEG, PNG"
            )

        if self.EXTENSION_TO_MIME[extension] != mime_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File content does not match extension {extension}"
            )

        self._security_check(content, mime_type)

        await file.seek(0)
        return content, mime_type

    def _get_file_extension(self, filename: str) -> str:
        """Lowercase extension including the dot, or '' when there is none."""
        if '.' not in filename:
            return ''
        return '.' + filename.rsplit('.', 1)[1].lower()

    def _detect_mime_type(self, content: bytes) -> str:
        """
        Detect MIME type from file content using python-magic.

        Falls back to signature matching when libmagic fails on the buffer.
        """
        try:
            return magic.from_buffer(content, mime=True)
        except Exception as e:
            logger.error(f"Error detecting MIME type with python-magic: {e}")
            return self._detect_mime_fallback(content)

    def _detect_mime_fallback(self, content: bytes) -> str:
        if content.startswith(b'%PDF'):
            return "application/pdf"
        if content.startswith(b'\xFF\xD8\xFF'):
            return "image/jpeg"
        if content.startswith(b'\x89PNG\r\n\x1a\n'):
            return "image/png"
        return "application/octet-stream"

    def _security_check(self, content: bytes, mime_type: str) -> None:
        """
        Reject executables and PDFs carrying JavaScript.

        Raises:
            HTTPException 400: If the content looks dangerous
        """
        for signature in (b'\x4D\x5A', b'\x7F\x45\x4C\x46'):
            if content.startswith(signature):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Suspicious file content detected. File rejected for security reasons."
                )

        if mime_type == "application/pdf" and (b'/JavaScript' in content or b'/JS ' in content):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Document contains JavaScript and was rejected for security reasons."
            )

    def validate_file_size(self, content_length: Optional[int]) -> None:
        """
        Early rejection based on the Content-Length header.

        Raises:
            HTTPException 400: If the declared size is over the limit
        """
        if content_length and content_length > self.MAX_FILE_SIZE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large. Maximum size: {self.MAX_FILE_SIZE // (1024 * 1024)}MB"
            )


# Singleton instance
document_validation_service = DocumentValidationService()
