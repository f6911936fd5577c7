import os
import re
import uuid

from flask import current_app
from werkzeug.security import safe_join
from werkzeug.utils import secure_filename

from mangaverse.errors import ValidationError
from mangaverse.logger import get_logger


logger = get_logger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
ALLOWED_IMAGE_MIMETYPES = {"image/jpeg", "image/png", "image/webp"}
UPLOAD_URL_PREFIX = "/uploads/"


def _natural_sort_key(value):
    normalized = value.replace("\\", "/").lower()
    return [
        int(part) if part.isdigit() else part
        for part in re.split(r"(\d+)", normalized)
    ]


def _file_size(storage):
    stream = storage.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def save_image(storage, prefix="img"):
    """Validate and store one uploaded image, returning its public URL."""
    original_name = secure_filename(os.path.basename(storage.filename or ""))
    _, ext = os.path.splitext(original_name)
    ext = ext.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS or (
        storage.mimetype and storage.mimetype not in ALLOWED_IMAGE_MIMETYPES
    ):
        raise ValidationError("Invalid file type. Only JPEG, PNG, and WebP are allowed.")
    if _file_size(storage) > current_app.config["MAX_UPLOAD_FILE_BYTES"]:
        raise ValidationError("File too large")

    filename = f"{prefix}_{uuid.uuid4().hex}{ext}"
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    storage.save(os.path.join(folder, filename))
    logger.info("Stored upload %s as %s", original_name, filename)
    return UPLOAD_URL_PREFIX + filename


def save_images(storages, prefix="page"):
    files = [f for f in storages if f and f.filename]
    files.sort(key=lambda f: _natural_sort_key(os.path.basename(f.filename)))
    if len(files) > current_app.config["MAX_CHAPTER_PAGES"]:
        raise ValidationError(f"At most {current_app.config['MAX_CHAPTER_PAGES']} pages per chapter")
    saved = []
    try:
        for storage in files:
            saved.append(save_image(storage, prefix=prefix))
    except ValidationError:
        remove_uploads(saved)
        raise
    return saved


def upload_path(url):
    """Map a stored upload URL to its file, or None when it points elsewhere."""
    if not isinstance(url, str) or not url.startswith(UPLOAD_URL_PREFIX):
        return None
    return safe_join(current_app.config["UPLOAD_FOLDER"], url[len(UPLOAD_URL_PREFIX):])


def remove_uploads(urls):
    for url in urls or []:
        path = upload_path(url)
        if path is None:
            if isinstance(url, str) and url.startswith(UPLOAD_URL_PREFIX):
                logger.warning("Refusing to remove %r outside the upload folder", url)
            continue
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError:
            logger.warning("Could not remove upload %s", path)


def external_image_url(value):
    """Accept a client-supplied image link; local uploads only come from file fields."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not value.startswith(("http://", "https://")):
        raise ValidationError("Image URL must be an http(s) link")
    return value
