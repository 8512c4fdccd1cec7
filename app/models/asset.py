"""
Asset and sub-asset record vocabulary: kinds, attachment categories, field names
"""

from enum import Enum
from typing import Dict, List

from app.core.storage import Collection


class EntityKind(str, Enum):
    """The two kinds of stored entity"""
    ASSET = "asset"
    SUB_ASSET = "subAsset"

    @property
    def collection(self) -> Collection:
        return Collection.ASSETS if self is EntityKind.ASSET else Collection.SUB_ASSETS

    @property
    def label(self) -> str:
        return "Asset" if self is EntityKind.ASSET else "Sub-asset"


class AttachmentCategory(str, Enum):
    """Fixed attachment folders under the data directory"""
    IMAGES = "Images"
    RECEIPTS = "Receipts"
    MANUALS = "Manuals"


class AttachmentField:
    """Keys under which one attachment category is stored on a record"""

    def __init__(self, category: AttachmentCategory, prefix: str):
        self.category = category
        self.paths_key = f"{prefix}Paths"
        self.info_key = f"{prefix}Info"
        # Legacy single-path mirror of paths[0]; also the duplication selector key
        self.legacy_key = f"{prefix}Path"

    def source_paths(self, record: dict) -> List[str]:
        """Paths to copy: the plural list, or the legacy path when the list is absent"""
        paths = record.get(self.paths_key)
        if isinstance(paths, list):
            return [p for p in paths if isinstance(p, str) and p]
        legacy = record.get(self.legacy_key)
        return [legacy] if isinstance(legacy, str) and legacy else []

    def owns(self, path: str) -> bool:
        """True for '/Images/x.jpg' or 'Images/x.jpg', a file directly in this category's folder"""
        if not isinstance(path, str):
            return False
        parts = path.replace("\\", "/").lstrip("/").split("/")
        return len(parts) == 2 and parts[0] == self.category.value and parts[1] not in ("", ".", "..")

    def source_info(self, record: dict) -> List[dict]:
        info = record.get(self.info_key)
        return list(info) if isinstance(info, list) else []

    def all_paths(self, record: dict) -> List[str]:
        """Every path the record references in this category, plural and legacy"""
        paths = []
        listed = record.get(self.paths_key)
        if isinstance(listed, list):
            paths.extend(p for p in listed if isinstance(p, str) and p)
        legacy = record.get(self.legacy_key)
        if isinstance(legacy, str) and legacy:
            paths.append(legacy)
        return paths


ATTACHMENT_FIELDS = [
    AttachmentField(AttachmentCategory.IMAGES, "photo"),
    AttachmentField(AttachmentCategory.RECEIPTS, "receipt"),
    AttachmentField(AttachmentCategory.MANUALS, "manual"),
]


def blank_warranty() -> Dict[str, object]:
    return {"scope": "", "expirationDate": None, "isLifetime": False}
