# sniffle/receipt/storage.py
import os
import shutil
import uuid

PARTIAL_SUBDIR = ".partial"
_FORBIDDEN = ("/", "\\", "\x00")


class InvalidReceiptName(ValueError):
    """Raised for receipt names that could escape the storage directory."""


def validate_name(name):
    if not name or name in {".", "..", PARTIAL_SUBDIR}:
        raise InvalidReceiptName(f"invalid receipt name: {name!r}")
    if any(ch in name for ch in _FORBIDDEN):
        raise InvalidReceiptName(f"invalid receipt name: {name!r}")
    return name


class ReceiptDirectory:
    """Receipt files on disk, keyed by their original filename.

    Nothing is cached: every call goes back to the filesystem.
    """

    def __init__(self, root):
        self.root = os.path.abspath(root)

    def ensure(self):
        os.makedirs(os.path.join(self.root, PARTIAL_SUBDIR), exist_ok=True)

    def path_for(self, name):
        return os.path.join(self.root, validate_name(name))

    def list(self):
        """Sorted names of stored receipts (regular files only)."""
        with os.scandir(self.root) as it:
            return sorted(e.name for e in it if e.is_file())

    def save(self, name, stream, chunk_size=64 * 1024):
        """Copy ``stream`` into the directory under ``name``.

        Bytes land in a temp file under ``.partial/`` first and are moved into
        place with ``os.replace``, so an existing receipt is swapped out whole.
        """
        target = self.path_for(name)
        self.ensure()
        tmp_path = os.path.join(self.root, PARTIAL_SUBDIR, f"{uuid.uuid4().hex}.tmp")
        # 0o666 minus the process umask, like any other newly created file
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
        try:
            with os.fdopen(fd, "wb") as out:
                shutil.copyfileobj(stream, out, chunk_size)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        return target

    def open(self, name):
        """Open a stored receipt for binary reading. Raises ``OSError`` if absent."""
        return open(self.path_for(name), "rb")
