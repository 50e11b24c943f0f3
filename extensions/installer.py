"""Download and unpack primitives for toolchain installs.

Handles fetching release archives, extracting them into place and guarding
installs with an advisory lock.
"""

from __future__ import annotations

import gzip
import logging
import lzma
import os
import shutil
import sys
import tarfile
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import httpx

from extensions.base import NullProgress, ProgressReporter

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

_CORRUPT_ARCHIVE_ERRORS = (
    tarfile.TarError,
    zipfile.BadZipFile,
    gzip.BadGzipFile,
    lzma.LZMAError,
    zlib.error,
    EOFError,
)


class InstallError(Exception):
    """Raised when a toolchain installation step fails."""

    pass


class DownloadError(InstallError):
    """Raised when a release archive cannot be fetched."""

    pass


class ExtractionError(InstallError):
    """Raised when a release archive cannot be unpacked."""

    pass


class FilesystemError(InstallError):
    """Raised when install directories cannot be created or written."""

    pass


def make_dirs(*paths: Path) -> None:
    """Create directories (and parents) if they do not exist.

    Raises:
        FilesystemError: If a directory cannot be created.
    """
    for path in paths:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create directory {path}: {e}") from e


def download_archive(
    url: str,
    dest: Path,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    progress: ProgressReporter | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Path:
    """Stream a release archive to disk.

    The body is written to ``<dest>.part`` and renamed to ``dest`` only once
    the whole response has been received, so an interrupted download never
    looks like a complete archive.

    Args:
        url: Archive URL.
        dest: Final archive path.
        timeout: Network timeout in seconds.
        progress: Receives the byte count as it arrives.
        transport: Optional httpx transport (used to stub the network).

    Returns:
        The archive path.

    Raises:
        DownloadError: On transport failure, timeout or non-success status.
        FilesystemError: If the archive cannot be written.
    """
    progress = progress or NullProgress()
    part = dest.with_name(dest.name + ".part")

    logger.info("Downloading %s", url)
    try:
        with httpx.Client(
            timeout=timeout, follow_redirects=True, transport=transport
        ) as client:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                length = response.headers.get("Content-Length")
                progress.set_total(int(length) if length else None)
                with open(part, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
                        progress.advance(len(chunk))
        os.replace(part, dest)
    except httpx.HTTPStatusError as e:
        raise DownloadError(
            f"Download of {url} failed with status {e.response.status_code}"
        ) from e
    except httpx.RequestError as e:
        raise DownloadError(f"Download of {url} failed: {e}") from e
    except OSError as e:
        raise FilesystemError(f"Cannot write {dest}: {e}") from e
    finally:
        part.unlink(missing_ok=True)

    return dest


def unpack_archive(
    archive: Path,
    target: Path,
    *,
    staging_dir: Path,
    progress: ProgressReporter | None = None,
) -> Path:
    """Extract an archive and move its root directory to ``target``.

    Extraction happens in a scratch directory under ``staging_dir``. Only a
    fully extracted tree is renamed into place; a failure leaves ``target``
    untouched. If the archive holds a single top-level directory, that
    directory becomes ``target``; otherwise the archive contents do.

    Args:
        archive: A .zip file or any tar archive readable by tarfile.
        target: Final directory (replaced if it already exists).
        staging_dir: Scratch space on the same filesystem as ``target``.
        progress: Receives one unit per archive member.

    Returns:
        The target path.

    Raises:
        ExtractionError: If the archive is corrupt, truncated or empty.
        FilesystemError: If the tree cannot be written or moved.
    """
    progress = progress or NullProgress()
    make_dirs(staging_dir, target.parent)

    scratch = Path(tempfile.mkdtemp(prefix=".unpack-", dir=staging_dir))
    try:
        if archive.suffix == ".zip":
            with zipfile.ZipFile(archive) as zf:
                members = zf.infolist()
                progress.set_total(len(members))
                zf.extractall(scratch, members=_tracked(members, progress))
        else:
            with tarfile.open(archive, "r:*") as tf:
                members = tf.getmembers()
                progress.set_total(len(members))
                tf.extractall(scratch, members=_tracked(members, progress), filter="data")

        entries = list(scratch.iterdir())
        if not entries:
            raise ExtractionError(f"Archive {archive.name} is empty")
        root = entries[0] if len(entries) == 1 and entries[0].is_dir() else scratch

        if target.exists():
            logger.warning("Replacing incomplete install at %s", target)
            shutil.rmtree(target)
        os.rename(root, target)
    except _CORRUPT_ARCHIVE_ERRORS as e:
        raise ExtractionError(f"Cannot extract {archive.name}: {e}") from e
    except OSError as e:
        raise FilesystemError(f"Cannot install into {target}: {e}") from e
    finally:
        shutil.rmtree(scratch, ignore_errors=True)

    logger.info("Unpacked %s into %s", archive.name, target)
    return target


def _tracked(members: Iterable, progress: ProgressReporter) -> Iterator:
    for member in members:
        yield member
        progress.advance(1)


@contextmanager
def install_lock(path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock on ``path`` for the block.

    Serializes check-then-install sequences between processes activating
    the same workspace. The lock is released when the file is closed.

    Raises:
        FilesystemError: If the lock file cannot be created.
    """
    make_dirs(path.parent)
    try:
        f = open(path, "a+b")
    except OSError as e:
        raise FilesystemError(f"Cannot open lock file {path}: {e}") from e

    with f:
        if sys.platform == "win32":
            msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)
        else:
            fcntl.flock(f, fcntl.LOCK_EX)
        logger.debug("Acquired install lock %s", path)
        yield
