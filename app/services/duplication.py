"""
Duplication of assets and sub-assets, optionally with their whole component subtree
"""

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import anyio

from app.core.exceptions import NotFoundError, ValidationError
from app.core.storage import Collection, EntityStore
from app.models.asset import ATTACHMENT_FIELDS, EntityKind, blank_warranty
from app.models.base import generate_id, stamp_created
from app.services.attachments import AttachmentManager
from app.services.resolver import find_all_descendants

logger = logging.getLogger(__name__)

SUB_ASSETS_SELECTOR = "subAssets"


def _is_present(value: Any) -> bool:
    # '', None, 0, False, [] and {} all count as an empty source value
    return bool(value)


class CopiedProperty:
    """One entry of the duplication catalogue

    The source value is copied iff one of ``selectors`` is selected and the
    value is present; otherwise the property gets its default.
    """

    def __init__(
        self,
        key: str,
        default: Any,
        selectors: Sequence[str] = (),
        clone: Optional[Callable[[Any], Any]] = None,
        accepts: Optional[type] = None
    ):
        self.key = key
        self.default = default
        self.selectors = (key,) + tuple(selectors)
        self.clone = clone
        self.accepts = accepts

    def is_selected(self, selected: Mapping[str, Any]) -> bool:
        return any(selected.get(name) for name in self.selectors)

    def value_for(self, source: Mapping[str, Any], selected: Mapping[str, Any]) -> Any:
        value = source.get(self.key)
        if (
            self.is_selected(selected)
            and _is_present(value)
            and (self.accepts is None or isinstance(value, self.accepts))
        ):
            return self.clone(value) if self.clone else value
        return self.default() if callable(self.default) else self.default


COMMON_PROPERTIES = [
    CopiedProperty("manufacturer", ""),
    CopiedProperty("modelNumber", ""),
    CopiedProperty("purchaseDate", None),
    CopiedProperty("link", ""),
    CopiedProperty("serialNumber", ""),
    CopiedProperty("quantity", 1),
    CopiedProperty("tags", list, clone=list, accepts=list),
    CopiedProperty("warranty", blank_warranty, clone=dict, accepts=dict),
]

# description/notes and price/purchasePrice are one catalogue entry each, so an
# asset duplication selecting "description" also carries its components' notes
CATALOGUE: Dict[EntityKind, List[CopiedProperty]] = {
    EntityKind.ASSET: COMMON_PROPERTIES + [
        CopiedProperty("description", "", selectors=("notes",)),
        CopiedProperty("price", 0, selectors=("purchasePrice",)),
        CopiedProperty("secondaryWarranty", blank_warranty, clone=dict, accepts=dict),
    ],
    EntityKind.SUB_ASSET: COMMON_PROPERTIES + [
        CopiedProperty("notes", "", selectors=("description",)),
        CopiedProperty("purchasePrice", 0, selectors=("price",)),
    ],
}

MAINTENANCE_EVENTS = CopiedProperty("maintenanceEvents", list, accepts=list)


class DuplicationBatch:
    """Accumulates everything one duplication call creates

    ``sub_assets`` is the working sub-asset collection: it starts as the
    stored document and grows as clones are produced, so it is exactly what
    gets committed.
    """

    def __init__(self, assets: List[dict], sub_assets: List[dict]):
        self.assets = list(assets)
        self.sub_assets = list(sub_assets)
        self.taken_ids = {r.get("id") for r in self.assets} | {r.get("id") for r in self.sub_assets}
        self.items: List[dict] = []
        self.nested_items: List[dict] = []
        self.copied_files: List[str] = []

    def allocate_id(self) -> str:
        new_id = generate_id(self.taken_ids)
        self.taken_ids.add(new_id)
        return new_id

    def add_top_level(self, record: dict, kind: EntityKind) -> None:
        self.items.append(record)
        if kind is EntityKind.ASSET:
            self.assets.append(record)
        else:
            self.sub_assets.append(record)

    def add_nested(self, record: dict) -> None:
        self.nested_items.append(record)
        self.sub_assets.append(record)


@dataclass
class DuplicationResult:
    items: List[dict] = field(default_factory=list)
    nested_items: List[dict] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.items)


class DuplicationEngine:
    """Produces N clones of an asset or sub-asset"""

    def __init__(self, store: EntityStore, attachments: AttachmentManager, max_count: int = 100):
        self.store = store
        self.attachments = attachments
        self.max_count = max_count

    def validate(self, source: Any, count: Any, selected_properties: Any, kind: EntityKind) -> None:
        """Reject a request before anything is read or written"""
        if not isinstance(source, Mapping) or not source.get("id"):
            raise ValidationError(f"Source {kind.label.lower()} is required", field="source")
        if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= self.max_count:
            raise ValidationError(f"Count must be between 1 and {self.max_count}", field="count")
        if not isinstance(selected_properties, Mapping):
            raise ValidationError("Selected properties object is required", field="selectedProperties")

    async def duplicate(
        self,
        source: Mapping[str, Any],
        count: int,
        selected_properties: Mapping[str, Any],
        kind: EntityKind
    ) -> DuplicationResult:
        kind = EntityKind(kind)
        self.validate(source, count, selected_properties, kind)
        source_id = source["id"]

        async with self.store.transaction(Collection.ASSETS, Collection.SUB_ASSETS) as tx:
            stored = next((r for r in tx[kind.collection] if r.get("id") == source_id), None)
            if stored is None:
                raise NotFoundError(kind.label, source_id)

            logger.debug(f"Duplicating {kind.value} {source_id} {count} times with properties: {dict(selected_properties)}")
            batch = DuplicationBatch(tx[Collection.ASSETS], tx[Collection.SUB_ASSETS])

            descendants: List[dict] = []
            if selected_properties.get(SUB_ASSETS_SELECTOR):
                if kind is EntityKind.ASSET:
                    descendants = find_all_descendants(stored["id"], None, batch.sub_assets)
                else:
                    descendants = find_all_descendants(stored.get("parentId"), stored["id"], batch.sub_assets)

            try:
                for index in range(1, count + 1):
                    duplicate = await self.build_clone(stored, index, selected_properties, kind, batch)
                    batch.add_top_level(duplicate, kind)
                    await self.clone_subtree(stored, duplicate, descendants, selected_properties, kind, batch)

                changes = {}
                if kind is EntityKind.ASSET:
                    changes[Collection.ASSETS] = batch.assets
                if kind is EntityKind.SUB_ASSET or batch.nested_items:
                    changes[Collection.SUB_ASSETS] = batch.sub_assets
                await tx.commit(changes)
            finally:
                # Copies belong to records that were never persisted
                if not tx.committed and batch.copied_files:
                    failed = await self.attachments.delete_many(batch.copied_files)
                    logger.error(
                        f"Duplication of {kind.value} {source_id} not persisted; "
                        f"removed {len(batch.copied_files) - failed} copied files"
                    )

        logger.info(
            f"Created {len(batch.items)} duplicates of {kind.value} {source_id} "
            f"and {len(batch.nested_items)} nested sub-assets"
        )
        return DuplicationResult(items=batch.items, nested_items=batch.nested_items)

    async def build_clone(
        self,
        source: Mapping[str, Any],
        index: int,
        selected: Mapping[str, Any],
        kind: EntityKind,
        batch: DuplicationBatch
    ) -> dict:
        """One duplicate of ``source`` named '{name} ({index})', without its subtree"""
        duplicate: Dict[str, Any] = {
            "id": batch.allocate_id(),
            "name": f"{source.get('name', '')} ({index})",
        }
        if kind is EntityKind.SUB_ASSET:
            duplicate["parentId"] = source.get("parentId")
            duplicate["parentSubId"] = source.get("parentSubId") or None

        for prop in CATALOGUE[kind]:
            duplicate[prop.key] = prop.value_for(source, selected)

        # Copied events never reuse the source's event ids
        duplicate["maintenanceEvents"] = [
            {**event, "id": batch.allocate_id()}
            for event in MAINTENANCE_EVENTS.value_for(source, selected)
            if isinstance(event, Mapping)
        ]

        await self.clone_attachments(source, duplicate, selected, batch)
        return stamp_created(duplicate)

    async def clone_attachments(
        self,
        source: Mapping[str, Any],
        duplicate: Dict[str, Any],
        selected: Mapping[str, Any],
        batch: DuplicationBatch
    ) -> None:
        for attachment in ATTACHMENT_FIELDS:
            paths: List[str] = []
            info: List[dict] = []
            if selected.get(attachment.legacy_key):
                source_paths = attachment.source_paths(source)
                source_info = attachment.source_info(source)
                aligned = len(source_info) == len(source_paths)
                copies = await self.attachments.copy_many(source_paths, attachment.category)
                for position, new_path in enumerate(copies):
                    # A missing source file shrinks the list instead of failing
                    if new_path is None:
                        continue
                    paths.append(new_path)
                    if aligned:
                        info.append(dict(source_info[position]))
                    else:
                        info.append({
                            "originalName": PurePosixPath(str(source_paths[position])).name,
                            "size": await anyio.to_thread.run_sync(self.attachments.file_size, new_path),
                        })
                batch.copied_files.extend(paths)
            duplicate[attachment.paths_key] = paths
            duplicate[attachment.info_key] = info
            duplicate[attachment.legacy_key] = paths[0] if paths else None

    async def clone_subtree(
        self,
        source: Mapping[str, Any],
        duplicate: Dict[str, Any],
        descendants: List[dict],
        selected: Mapping[str, Any],
        kind: EntityKind,
        batch: DuplicationBatch
    ) -> None:
        """Clone every descendant once, re-pointing parents at their clones

        ``descendants`` is in pre-order, so a parent is always remapped before
        any of its children is cloned.
        """
        if not descendants:
            return

        id_map: Dict[str, str] = {}
        if kind is EntityKind.ASSET:
            root_asset_id = duplicate["id"]
        else:
            root_asset_id = source.get("parentId")
            id_map[source["id"]] = duplicate["id"]

        for descendant in descendants:
            clone = await self.build_clone(descendant, 1, selected, EntityKind.SUB_ASSET, batch)
            clone["parentId"] = root_asset_id
            original_parent = descendant.get("parentSubId")
            if original_parent:
                clone["parentSubId"] = id_map.get(original_parent)
                if clone["parentSubId"] is None:
                    logger.warning(
                        f"No clone found for parent {original_parent} of sub-asset {descendant.get('id')}; "
                        f"attaching its clone at the top level"
                    )
            else:
                clone["parentSubId"] = None
            id_map[descendant["id"]] = clone["id"]
            batch.add_nested(clone)

        logger.debug(f"Cloned {len(descendants)} sub-assets under {duplicate['id']}")
