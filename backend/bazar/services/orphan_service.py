import logging
import os
import time
from typing import List

from filelock import FileLock, Timeout

from bazar.repositories.gateway import PersistenceGateway
from bazar.services.upload_service import URL_PREFIX, UploadService

log = logging.getLogger("bazar.orphans")

LOCK_NAME = ".sweep.lock"


class OrphanSweeper:
    """Deletes upload files that no product references any more."""

    def __init__(self, gateway: PersistenceGateway, uploads: UploadService, grace_seconds: int = 3600):
        self.gateway = gateway
        self.uploads = uploads
        self.grace_seconds = grace_seconds

    def find_orphans(self) -> List[str]:
        if not os.path.isdir(self.uploads.upload_dir):
            return []
        referenced = {os.path.basename(p) for p in self.gateway.list_photos()}
        cutoff = time.time() - self.grace_seconds
        orphans = []
        for entry in os.scandir(self.uploads.upload_dir):
            if not entry.is_file() or entry.name.startswith("."):
                continue
            if entry.name in referenced:
                continue
            # a fresh file may belong to a create request still in flight
            if entry.stat().st_mtime > cutoff:
                continue
            orphans.append(entry.name)
        return sorted(orphans)

    def sweep(self) -> List[str]:
        """
        Remove orphaned uploads and return their names.

        Only one process sweeps at a time; when another one holds the lock
        this run is skipped and returns an empty list.
        """
        self.uploads.ensure_dir()
        lock = FileLock(os.path.join(self.uploads.upload_dir, LOCK_NAME))
        try:
            with lock.acquire(timeout=0):
                removed = [
                    name for name in self.find_orphans()
                    if self.uploads.discard(URL_PREFIX + name)
                ]
        except Timeout:
            log.debug("Orphan sweep already running elsewhere; skipped")
            return []
        if removed:
            log.info("Orphan sweep removed %d file(s)", len(removed))
        return removed
