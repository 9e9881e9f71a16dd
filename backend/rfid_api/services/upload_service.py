import logging
import os
import time

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


def photo_filename(original_name):
    name = secure_filename(original_name or "") or "photo"
    return f"{int(time.time() * 1000)}-{name}"


def save_photo(file_storage, folder):
    """Store an uploaded photo and return the path that gets persisted."""
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, photo_filename(file_storage.filename))
    file_storage.save(path)
    logger.info("Stored photo %s", path)
    return path
