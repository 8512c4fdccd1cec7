"""
Insert, merge-update and read access for assets and sub-assets
"""

import logging
from typing import Any, Dict, List, Optional

from app.core.exceptions import NotFoundError, ValidationError
from app.core.storage import Collection, EntityStore
from app.models.asset import ATTACHMENT_FIELDS, EntityKind
from app.models.base import generate_id, stamp_created, utc_now
from app.services.attachments import AttachmentManager
from app.services.resolver import find_all_descendants

logger = logging.getLogger(__name__)


def _with_quantity(record: dict) -> dict:
    # Records written before quantity existed read back as 1
    return {**record, "quantity": record.get("quantity") or 1}


def _sync_attachment_fields(record: dict) -> None:
    """Keep legacy single paths mirroring paths[0] and metadata aligned with paths

    Every stored path must name a file directly in its category folder.
    """
    for attachment in ATTACHMENT_FIELDS:
        paths = record.get(attachment.paths_key)
        if not isinstance(paths, list):
            legacy = record.get(attachment.legacy_key)
            if legacy is not None and not attachment.owns(legacy):
                raise ValidationError(
                    f"{attachment.legacy_key} must be a file in the {attachment.category.value} folder",
                    field=attachment.legacy_key
                )
            continue
        if not all(attachment.owns(path) for path in paths):
            raise ValidationError(
                f"{attachment.paths_key} entries must be files in the {attachment.category.value} folder",
                field=attachment.paths_key
            )
        info = record.get(attachment.info_key) or []
        if info and len(info) != len(paths):
            raise ValidationError(
                f"{attachment.info_key} must have one entry per path in {attachment.paths_key}",
                field=attachment.info_key
            )
        record[attachment.info_key] = info
        record[attachment.legacy_key] = paths[0] if paths else None


class EntityService:
    """Write path for new and updated records, enforcing the tree invariants"""

    def __init__(self, store: EntityStore, attachments: AttachmentManager, max_bulk_items: int = 100):
        self.store = store
        self.attachments = attachments
        self.max_bulk_items = max_bulk_items

    async def list_all(self, kind: EntityKind, parent_id: Optional[str] = None) -> List[dict]:
        records = await self.store.read_all(kind.collection)
        if parent_id is not None:
            records = [r for r in records if r.get("parentId") == parent_id]
        return [_with_quantity(r) for r in records]

    async def get(self, kind: EntityKind, entity_id: str) -> dict:
        records = await self.store.read_all(kind.collection)
        record = next((r for r in records if r.get("id") == entity_id), None)
        if record is None:
            raise NotFoundError(kind.label, entity_id)
        return _with_quantity(record)

    async def descendants(self, sub_asset_id: str) -> List[dict]:
        sub_assets = await self.store.read_all(Collection.SUB_ASSETS)
        root = next((r for r in sub_assets if r.get("id") == sub_asset_id), None)
        if root is None:
            raise NotFoundError(EntityKind.SUB_ASSET.label, sub_asset_id)
        return find_all_descendants(root.get("parentId"), sub_asset_id, sub_assets)

    async def create(self, kind: EntityKind, data: Dict[str, Any]) -> dict:
        created = await self.create_many(kind, [data])
        return created[0]

    async def create_many(self, kind: EntityKind, items: List[Dict[str, Any]]) -> List[dict]:
        """Insert records in one commit; any invalid item rejects the whole batch"""
        if not items:
            raise ValidationError("Items array is required", field="items")
        if len(items) > self.max_bulk_items:
            raise ValidationError(f"Cannot create more than {self.max_bulk_items} records at once", field="items")

        files_to_delete: List[str] = []
        async with self.store.transaction(Collection.ASSETS, Collection.SUB_ASSETS) as tx:
            assets = tx[Collection.ASSETS]
            sub_assets = tx[Collection.SUB_ASSETS]
            taken = {r.get("id") for r in assets} | {r.get("id") for r in sub_assets}
            new_records: List[dict] = []

            for item in items:
                record = dict(item)
                files_to_delete.extend(record.pop("filesToDelete", None) or [])
                self._check_name(record, kind)
                if record.get("id"):
                    if record["id"] in taken:
                        raise ValidationError(f"{kind.label} id '{record['id']}' already exists", field="id")
                else:
                    record["id"] = generate_id(taken)
                taken.add(record["id"])

                if kind is EntityKind.SUB_ASSET:
                    record["parentSubId"] = record.get("parentSubId") or None
                    self._check_parents(record, assets, sub_assets + new_records)

                if record.get("quantity") is None:
                    record["quantity"] = 1
                record["maintenanceEvents"] = self._events_with_ids(record.get("maintenanceEvents"), taken)
                _sync_attachment_fields(record)
                new_records.append(stamp_created(record))

            await tx.commit({kind.collection: tx[kind.collection] + new_records})

        if files_to_delete:
            await self.attachments.delete_many(files_to_delete)
        logger.info(f"Created {len(new_records)} {kind.value} records")
        return new_records

    async def update(self, kind: EntityKind, entity_id: str, data: Dict[str, Any]) -> dict:
        """Merge ``data`` over the stored record"""
        changes = dict(data)
        files_to_delete = changes.pop("filesToDelete", None) or []
        if changes.get("id", entity_id) != entity_id:
            raise ValidationError("Record id cannot be changed", field="id")
        changes.pop("id", None)
        changes.pop("createdAt", None)

        async with self.store.transaction(Collection.ASSETS, Collection.SUB_ASSETS) as tx:
            records = tx[kind.collection]
            position = next((i for i, r in enumerate(records) if r.get("id") == entity_id), None)
            if position is None:
                raise NotFoundError(kind.label, entity_id)
            existing = records[position]

            if "name" in changes:
                self._check_name(changes, kind)
            if changes.get("quantity", existing.get("quantity")) is None:
                changes["quantity"] = existing.get("quantity") or 1
            if "maintenanceEvents" in changes:
                taken = {r.get("id") for r in records}
                changes["maintenanceEvents"] = self._events_with_ids(changes["maintenanceEvents"], taken)

            if kind is EntityKind.SUB_ASSET:
                if "parentId" in changes and changes["parentId"] != existing.get("parentId"):
                    raise ValidationError("Sub-assets cannot be moved to another asset", field="parentId")
                if "parentSubId" in changes:
                    changes["parentSubId"] = changes["parentSubId"] or None
                    if changes["parentSubId"] != existing.get("parentSubId"):
                        self._check_reparent(existing, changes["parentSubId"], records)

            merged = {**existing, **changes, "id": entity_id, "updatedAt": utc_now()}
            _sync_attachment_fields(merged)

            if files_to_delete:
                await self.attachments.delete_many(files_to_delete)

            updated = list(records)
            updated[position] = merged
            await tx.commit({kind.collection: updated})

        logger.debug(f"Updated {kind.value} {entity_id}")
        return merged

    def _check_name(self, record: Dict[str, Any], kind: EntityKind) -> None:
        name = record.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(f"{kind.label} name is required", field="name")

    def _check_parents(self, record: dict, assets: List[dict], sub_assets: List[dict]) -> None:
        parent_id = record.get("parentId")
        if not isinstance(parent_id, str) or not parent_id.strip():
            raise ValidationError("Parent asset ID is required", field="parentId")
        if not any(a.get("id") == parent_id for a in assets):
            raise ValidationError(f"Parent asset '{parent_id}' not found", field="parentId")
        parent_sub_id = record.get("parentSubId")
        if parent_sub_id:
            parent_sub = next((sa for sa in sub_assets if sa.get("id") == parent_sub_id), None)
            if parent_sub is None or parent_sub.get("parentId") != parent_id:
                raise ValidationError(
                    f"Parent sub-asset '{parent_sub_id}' not found under asset '{parent_id}'",
                    field="parentSubId"
                )

    def _check_reparent(self, existing: dict, new_parent_sub_id: Optional[str], sub_assets: List[dict]) -> None:
        if new_parent_sub_id is None:
            return
        if new_parent_sub_id == existing.get("id"):
            raise ValidationError("A sub-asset cannot be its own parent", field="parentSubId")
        parent_sub = next((sa for sa in sub_assets if sa.get("id") == new_parent_sub_id), None)
        if parent_sub is None or parent_sub.get("parentId") != existing.get("parentId"):
            raise ValidationError(
                f"Parent sub-asset '{new_parent_sub_id}' not found under asset '{existing.get('parentId')}'",
                field="parentSubId"
            )
        descendant_ids = {
            d.get("id") for d in find_all_descendants(existing.get("parentId"), existing.get("id"), sub_assets)
        }
        if new_parent_sub_id in descendant_ids:
            raise ValidationError("Cannot move a sub-asset under its own descendant", field="parentSubId")

    def _events_with_ids(self, events: Any, taken: set) -> List[dict]:
        if not isinstance(events, list):
            return []
        result = []
        for event in events:
            if not isinstance(event, dict):
                continue
            if not event.get("id"):
                event = {**event, "id": generate_id(taken)}
            taken.add(event["id"])
            result.append(event)
        return result
