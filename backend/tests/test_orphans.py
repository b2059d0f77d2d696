import io
import os
import time

from filelock import FileLock

from bazar.services.orphan_service import LOCK_NAME, OrphanSweeper
from bazar.services.upload_service import UploadService


def _age(uploads, stored, seconds):
    path = uploads.path_for(stored)
    old = time.time() - seconds
    os.utime(path, (old, old))


def test_sweep_removes_only_old_unreferenced_files(client, gateway):
    uploads = UploadService(os.environ["UPLOAD_DIR"])
    kept = uploads.save(io.BytesIO(b"a"), "a.png", "image/png")
    orphan = uploads.save(io.BytesIO(b"b"), "b.png", "image/png")
    fresh = uploads.save(io.BytesIO(b"c"), "c.png", "image/png")
    gateway.insert_product("Com foto", None, 1.0, kept, "active")
    _age(uploads, kept, 7200)
    _age(uploads, orphan, 7200)

    sweeper = OrphanSweeper(gateway, uploads, grace_seconds=3600)
    assert sweeper.sweep() == [os.path.basename(orphan)]

    assert os.path.exists(uploads.path_for(kept))
    assert os.path.exists(uploads.path_for(fresh))
    assert not os.path.exists(uploads.path_for(orphan))


def test_sweep_skips_when_locked(client, gateway):
    uploads = UploadService(os.environ["UPLOAD_DIR"])
    orphan = uploads.save(io.BytesIO(b"b"), "b.png", "image/png")
    _age(uploads, orphan, 7200)
    sweeper = OrphanSweeper(gateway, uploads, grace_seconds=0)

    with FileLock(os.path.join(uploads.upload_dir, LOCK_NAME)):
        assert sweeper.sweep() == []
    assert os.path.exists(uploads.path_for(orphan))
    assert sweeper.sweep() == [os.path.basename(orphan)]
