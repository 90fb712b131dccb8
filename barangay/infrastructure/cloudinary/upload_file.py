# barangay/infrastructure/cloudinary/upload_file.py
from io import BytesIO
from typing import Optional
from PIL import Image
import cloudinary, cloudinary.uploader
from barangay.config.settings import settings


# Configure once; only used when settings.cloudinary_enabled
cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True,
)

CERTIFICATE_TAG = "certificate"


def certificate_png(page: Image.Image) -> BytesIO:
    """Flatten a rendered certificate page into an in-memory PNG."""
    if page.mode not in ("RGB", "L"):
        page = page.convert("RGB")
    buf = BytesIO()
    page.save(buf, format="PNG", optimize=True)
    buf.seek(0)
    return buf


def upload_certificate(
    page: Image.Image,
    public_id: str,
    folder: Optional[str] = None,
    resident_id: Optional[int] = None,
) -> str:
    tags = [CERTIFICATE_TAG]
    if resident_id is not None:
        tags.append(f"resident-{resident_id}")
    res = cloudinary.uploader.upload(
        certificate_png(page),
        resource_type="image",
        folder=folder or settings.CLOUDINARY_FOLDER,
        public_id=public_id,
        overwrite=True,
        format="png",
        tags=tags,
    )
    return res["secure_url"]
