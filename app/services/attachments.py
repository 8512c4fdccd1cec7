"""
Attachment file lifecycle: copy and delete files in the fixed category folders
"""

import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

import anyio

from app.models.asset import ATTACHMENT_FIELDS, AttachmentCategory

logger = logging.getLogger(__name__)


def _copy_bytes(source: Path, target: Path) -> None:
    if not source.is_file():
        raise FileNotFoundError(source)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)


def _normalize(relative_path: str) -> str:
    return relative_path.replace("\\", "/").lstrip("/")


class AttachmentManager:
    """Copies and deletes attachment files referenced by relative path

    Paths are stored either as ``/Images/name.jpg`` or ``Images/name.jpg``
    and always resolve to a file directly inside one of the category folders.
    """

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir).resolve()

    def initialize(self) -> None:
        for category in AttachmentCategory:
            (self.data_dir / category.value).mkdir(parents=True, exist_ok=True)

    def resolve(self, relative_path: str, category: Optional[AttachmentCategory] = None) -> Optional[Path]:
        """Absolute path for a stored relative path

        None unless the path lands directly in a category folder (``category``
        when given), so store documents and anything outside the data
        directory are never touched.
        """
        if not isinstance(relative_path, str):
            return None
        clean = _normalize(relative_path)
        if not clean:
            return None
        full = (self.data_dir / clean).resolve()
        categories = [category] if category is not None else list(AttachmentCategory)
        if full.parent not in {self.data_dir / c.value for c in categories}:
            return None
        return full

    def file_size(self, relative_path: str) -> int:
        full_path = self.resolve(relative_path)
        try:
            return full_path.stat().st_size if full_path else 0
        except OSError:
            return 0

    async def copy(self, source_path: Optional[str], category: AttachmentCategory) -> Optional[str]:
        """Duplicate a file into ``category``; None when the source cannot be copied"""
        if not source_path:
            return None

        full_source = self.resolve(source_path, category)
        if full_source is None:
            logger.warning(f"Refusing to copy path outside the {category.value} folder: {source_path}")
            return None

        # Original basename + timestamp + random suffix + original extension
        timestamp = int(time.time() * 1000)
        new_name = f"{full_source.stem}_copy_{timestamp}_{uuid.uuid4().hex[:8]}{full_source.suffix}"
        target = self.data_dir / category.value / new_name

        try:
            await anyio.to_thread.run_sync(_copy_bytes, full_source, target)
        except FileNotFoundError:
            logger.warning(f"Source file not found: {full_source}")
            return None
        except OSError as e:
            logger.error(f"Failed to copy file {source_path}: {e}")
            return None

        logger.debug(f"Copied file from {source_path} to {category.value}/{new_name}")
        return f"/{category.value}/{new_name}"

    async def copy_many(self, source_paths: List[Optional[str]], category: AttachmentCategory) -> List[Optional[str]]:
        """Copy concurrently; result i belongs to source_paths[i]"""
        results: List[Optional[str]] = [None] * len(source_paths)

        async def _copy(index: int, path: Optional[str]):
            results[index] = await self.copy(path, category)

        async with anyio.create_task_group() as tg:
            for index, path in enumerate(source_paths):
                tg.start_soon(_copy, index, path)
        return results

    async def delete(self, relative_path: Optional[str]) -> None:
        """Delete one file; a file that is already gone counts as deleted

        Other OS errors propagate to the caller.
        """
        if not relative_path:
            return
        full_path = self.resolve(relative_path)
        if full_path is None:
            logger.warning(f"Refusing to delete path outside the attachment folders: {relative_path}")
            return
        try:
            await anyio.to_thread.run_sync(full_path.unlink)
        except FileNotFoundError:
            logger.debug(f"File not found (already deleted?): {full_path}")
            return
        logger.debug(f"Deleted file: {full_path}")

    async def delete_many(self, paths: Iterable[str]) -> int:
        """Delete concurrently, logging failures; returns how many deletes failed"""
        failures = 0

        async def _delete(path: str):
            nonlocal failures
            try:
                await self.delete(path)
            except OSError as e:
                failures += 1
                logger.error(f"Failed to delete {path}, continuing: {e}")

        async with anyio.create_task_group() as tg:
            for path in unique_paths(paths):
                tg.start_soon(_delete, path)
        return failures


def unique_paths(paths: Iterable[str]) -> List[str]:
    """Drop empties and repeats, treating '/Images/a' and 'Images/a' as the same file"""
    seen = set()
    result = []
    for path in paths:
        if not isinstance(path, str) or not path:
            continue
        key = _normalize(path)
        if key in seen:
            continue
        seen.add(key)
        result.append(path)
    return result


def entity_paths(record: dict) -> List[str]:
    """Every attachment path a record references, across all categories"""
    paths: List[str] = []
    for field in ATTACHMENT_FIELDS:
        paths.extend(field.all_paths(record))
    return unique_paths(paths)
