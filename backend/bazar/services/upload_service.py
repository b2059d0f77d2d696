import hashlib
import logging
import os
import secrets
import time
from typing import BinaryIO, Optional

from bazar.services.exceptions import PersistenceError, UploadError

log = logging.getLogger("bazar.uploads")

ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/gif")
EXTENSION_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}
URL_PREFIX = "/uploads/"
CHUNK_SIZE = 64 * 1024


class UploadService:
    """
    Stores product photos on disk under a single uploads directory.

    Files get an unpredictable name (hash of time + random token) and are
    addressed by callers through their stored path, "/uploads/<name>".
    """

    def __init__(self, upload_dir: str, max_bytes: int = 10 * 1024 * 1024):
        self.upload_dir = os.path.abspath(upload_dir)
        self.max_bytes = max_bytes

    def ensure_dir(self):
        os.makedirs(self.upload_dir, exist_ok=True)

    @staticmethod
    def generate_name(ext: str) -> str:
        seed = f"{time.time_ns()}{secrets.token_hex(16)}".encode()
        return hashlib.sha256(seed).hexdigest()[:16] + ext.lower()

    def check(self, filename: Optional[str], content_type: Optional[str]) -> str:
        """Validate MIME type and extension; returns the lower-cased extension."""
        if content_type not in ALLOWED_MIME_TYPES:
            raise UploadError("unsupported file type, use JPG, PNG or GIF")
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in EXTENSION_TYPES:
            raise UploadError("unsupported file extension, use .jpg, .jpeg, .png or .gif")
        # the declared type has to agree with the extension
        if EXTENSION_TYPES[ext] != content_type:
            raise UploadError("file extension does not match its content type")
        return ext

    def save(self, stream: BinaryIO, filename: Optional[str], content_type: Optional[str]) -> str:
        """
        Validate and write an upload; returns its stored path.

        The size limit is enforced while copying, so an oversized file never
        lands on disk in full; the partial copy is removed before raising.
        """
        ext = self.check(filename, content_type)
        self.ensure_dir()
        name = self.generate_name(ext)
        target = os.path.join(self.upload_dir, name)

        written = 0
        try:
            with open(target, "xb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadError(
                            f"file too large, limit is {self.max_bytes // (1024 * 1024)}MB"
                        )
                    out.write(chunk)
        except UploadError:
            self._remove(target)
            log.info("Rejected upload %r: over %d bytes", filename, self.max_bytes)
            raise
        except OSError as e:
            self._remove(target)
            log.error("Could not write upload %s: %s", name, e)
            raise PersistenceError(f"could not store file: {e}")

        log.info("Stored upload %r as %s (%d bytes)", filename, name, written)
        return URL_PREFIX + name

    def path_for(self, stored_path: str) -> str:
        # basename only: a stored path must never reach outside upload_dir
        return os.path.join(self.upload_dir, os.path.basename(stored_path))

    def discard(self, stored_path: Optional[str]) -> bool:
        """Delete a stored upload. Missing files and I/O errors never raise."""
        if not stored_path:
            return False
        return self._remove(self.path_for(stored_path))

    def _remove(self, path: str) -> bool:
        try:
            os.remove(path)
            log.info("Removed upload file %s", os.path.basename(path))
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            log.warning("Could not remove upload file %s: %s", path, e)
            return False
