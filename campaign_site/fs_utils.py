"""Filesystem helpers: output directory setup and asset copying."""

from __future__ import annotations

import errno
import logging
import os
import random
import shutil
import stat
import time
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
STATIC_ASSETS = ("styles.css", "search.js")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def clean_output_dir(output_root: Path) -> None:
    """Delete and recreate the output directory."""
    if output_root.exists():
        def _handle_remove_readonly(func, path, exc_info):  # Windows: clear read-only then retry
            os.chmod(path, stat.S_IWRITE)
            func(path)
        shutil.rmtree(output_root, onerror=_handle_remove_readonly)
    ensure_dir(output_root)


# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
_WINDOWS_LOCK_ERRORS = (32, 33)


def _is_busy(exc: OSError) -> bool:
    """A transient lock, not a real permission problem."""
    return exc.errno == errno.EBUSY or getattr(exc, "winerror", None) in _WINDOWS_LOCK_ERRORS


def copy_file_with_retry(src: Path, dst: Path, max_retries: int = 5, base_delay: float = 0.1) -> None:
    """Copy *src* to *dst*, backing off exponentially while the file is locked.

    Errors other than a busy/locked file, and a lock that outlasts
    ``max_retries``, propagate.
    """
    for attempt in range(max_retries + 1):
        try:
            shutil.copy2(src, dst)
            return
        except OSError as exc:
            if not _is_busy(exc) or attempt == max_retries:
                if _is_busy(exc):
                    logger.error("Failed to copy %s after %d attempts: %s", src.name, max_retries + 1, exc)
                raise
            if attempt == 0:
                logger.warning("File busy, retrying copy of %s...", src.name)
            time.sleep(base_delay * (2 ** attempt) + random.uniform(0, 0.1))


def copy_images(source_root: Path, output_root: Path, images_folder: str = "_images") -> List[Path]:
    """Copy the vault's images folder to ``images/`` under the output root."""
    images_source = source_root / images_folder
    if not images_source.is_dir():
        logger.warning("Images folder %s does not exist", images_source)
        return []

    images_output = ensure_dir(output_root / "images")
    copied: List[Path] = []
    for src in sorted(images_source.iterdir()):
        if not src.is_file():
            continue
        dst = images_output / src.name
        copy_file_with_retry(src, dst)
        copied.append(dst)
    logger.info("Copied %d images", len(copied))
    return copied


def copy_static_assets(output_root: Path) -> None:
    """Ship the stylesheet and the search widget script."""
    for name in STATIC_ASSETS:
        src = STATIC_DIR / name
        if not src.is_file():
            logger.warning("Static asset %s not found", src)
            continue
        copy_file_with_retry(src, output_root / name)
        logger.debug("Copied %s", name)
