"""
import_engine.scratch - Private on-disk copies of uploaded files.

The importer streams from a scratch file instead of the upload buffer so
that parsing never holds the whole file in memory.  Each upload gets its
own collision-resistant file name; the file is removed on every exit
path.
"""

from __future__ import annotations

import logging
import secrets
import shutil
import time
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

import config

logger = logging.getLogger(__name__)

COPY_CHUNK = 64 * 1024


class ScratchSpace:
    """Storage-path provider for scratch files; inject one per test."""

    def __init__(self, directory: Optional[str | Path] = None):
        self.directory = Path(directory) if directory else Path(config.SCRATCH_DIR)

    def new_path(self) -> Path:
        stamp = int(time.time() * 1000)
        return self.directory / f"csv-upload-{stamp}-{secrets.token_hex(4)}.csv"

    @contextmanager
    def holding(self, content: bytes | BinaryIO) -> Iterator[Path]:
        """Write ``content`` to a fresh scratch file, yield its path, then delete it."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.new_path()
        try:
            with open(path, "wb") as out:
                if isinstance(content, (bytes, bytearray)):
                    out.write(content)
                else:
                    shutil.copyfileobj(content, out, COPY_CHUNK)
            logger.info(f"Saved upload to scratch file {path}")
            yield path
        finally:
            self.discard(path)

    @staticmethod
    def discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning(f"Failed to remove scratch file {path}: {exc}")
        else:
            logger.info(f"Removed scratch file {path}")
