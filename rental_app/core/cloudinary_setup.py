import asyncio
import logging

import cloudinary
import cloudinary.api
import cloudinary.uploader
from fastapi import HTTPException, UploadFile

from .settings import settings

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp"}


class CloudinaryClient:
    def __init__(self):
        self.enabled = settings.photo_storage_enabled
        if self.enabled:
            cloudinary.config(
                cloud_name=settings.CLOUDINARY_CLOUD_NAME,
                api_key=settings.CLOUDINARY_API_KEY,
                api_secret=settings.CLOUDINARY_SECRET_KEY,
                secure=True,
            )

    async def connect(self) -> bool:
        if not self.enabled:
            logger.info("Photo storage disabled: Cloudinary is not configured.")
            return False
        info = await asyncio.to_thread(cloudinary.api.ping)
        return info.get("status") == "ok"

    async def upload_photo(self, file: UploadFile, folder: str) -> str:
        if file.content_type not in ALLOWED_CONTENT_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"File '{file.filename}' must be a JPEG, PNG or WEBP image.",
            )
        content = await file.read()
        if len(content) > MAX_FILE_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"File '{file.filename}' exceeds maximum allowed size.",
            )

        result = await asyncio.to_thread(
            cloudinary.uploader.upload,
            content,
            folder=folder,
            resource_type="image",
        )
        return result["secure_url"]

    async def upload_photos(self, files: list[UploadFile] | None) -> list[str]:
        files = [f for f in (files or []) if f and f.filename]
        if not files:
            return []
        if not self.enabled:
            logger.info("Skipping %d photo(s): photo storage disabled.", len(files))
            return []
        return list(
            await asyncio.gather(
                *(self.upload_photo(f, settings.CLOUDINARY_FOLDER) for f in files)
            )
        )


cloudinary_client = CloudinaryClient()
