"""
Profile photo processing: validation with Pillow, square crop, WebP output.
"""
from PIL import Image
from io import BytesIO
from typing import Tuple
from fastapi import UploadFile, HTTPException
import logging

logger = logging.getLogger(__name__)


class ImageService:
    """Service for validating and normalising profile photos."""

    ALLOWED_MIME_TYPES = {
        "image/jpeg",
        "image/png",
        "image/webp"
    }

    ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}

    # Pillow format names accepted after decoding
    ALLOWED_FORMATS = {"JPEG", "PNG", "WEBP"}

    MAX_FILE_SIZE = 2 * 1024 * 1024  # 2MB
    PHOTO_SIZE = (512, 512)
    WEBP_QUALITY = 85

    async def validate_image(self, file: UploadFile) -> bytes:
        """
        Validate an uploaded profile photo.

        Args:
            file: The uploaded file

        Returns:
            The raw file content

        Raises:
            HTTPException 400: If validation fails
        """
        if file.content_type not in self.ALLOWED_MIME_TYPES:
            raise HTTPException(
                status_code=400,
                detail="Invalid file type. Allowed types: JPEG, PNG, WebP"
            )

        if file.filename:
            extension = file.filename.lower().rsplit('.', 1)[-1] if '.' in file.filename else ''
            if f".{extension}" not in self.ALLOWED_EXTENSIONS:
                raise HTTPException(
                    status_code=400,
                    detail=f"Invalid file extension. Allowed: {', '.join(sorted(self.ALLOWED_EXTENSIONS))}"
                )

        content = await file.read()
        if len(content) > self.MAX_FILE_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"File too large. Maximum size: {self.MAX_FILE_SIZE // (1024 * 1024)}MB"
            )

        try:
            image = Image.open(BytesIO(content))
            image_format = image.format
            image.verify()
        except Exception as e:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid image file: {str(e)}"
            )

        if image_format not in self.ALLOWED_FORMATS:
            raise HTTPException(
                status_code=400,
                detail="Invalid file type. Allowed types: JPEG, PNG, WebP"
            )

        await file.seek(0)
        return content

    def process_profile_photo(self, content: bytes) -> bytes:
        """
        Crop to a square, resize to 512x512 and encode as WebP.

        Raises:
            HTTPException 500: If Pillow fails on an image that passed validation
        """
        try:
            image = Image.open(BytesIO(content))

            # Flatten transparency onto white
            if image.mode in ('RGBA', 'LA', 'P'):
                background = Image.new('RGB', image.size, (255, 255, 255))
                if image.mode != 'RGBA':
                    image = image.convert('RGBA')
                background.paste(image, mask=image.split()[-1])
                image = background
            elif image.mode != 'RGB':
                image = image.convert('RGB')

            return self._convert_to_webp(self._resize_image(image, self.PHOTO_SIZE))
        except Exception as e:
            logger.error(f"Error processing profile photo: {e}")
            raise HTTPException(
                status_code=500,
                detail="Error processing image"
            )

    def _resize_image(self, image: Image.Image, size: Tuple[int, int]) -> Image.Image:
        """Center-crop to the target aspect ratio, then resize."""
        img_copy = image.copy()

        aspect_ratio = img_copy.width / img_copy.height
        target_aspect = size[0] / size[1]

        if aspect_ratio > target_aspect:
            new_width = int(img_copy.height * target_aspect)
            left = (img_copy.width - new_width) // 2
            img_copy = img_copy.crop((left, 0, left + new_width, img_copy.height))
        elif aspect_ratio < target_aspect:
            new_height = int(img_copy.width / target_aspect)
            top = (img_copy.height - new_height) // 2
            img_copy = img_copy.crop((0, top, img_copy.width, top + new_height))

        return img_copy.resize(size, Image.Resampling.LANCZOS)

    def _convert_to_webp(self, image: Image.Image) -> bytes:
        output = BytesIO()
        image.save(
            output,
            format='WEBP',
            quality=self.WEBP_QUALITY,
            method=6
        )
        return output.getvalue()


# Singleton instance
image_service = ImageService()
