"""
Cascading deletion of an asset or sub-asset, its descendants and their files
"""

import logging
from typing import List

from app.core.exceptions import NotFoundError
from app.core.storage import Collection, EntityStore
from app.models.asset import EntityKind
from app.services.attachments import AttachmentManager, entity_paths
from app.services.resolver import find_all_descendants

logger = logging.getLogger(__name__)


class CascadeDeletionEngine:
    """Removes an entity together with every descendant and every file they own"""

    def __init__(self, store: EntityStore, attachments: AttachmentManager):
        self.store = store
        self.attachments = attachments

    async def delete_with_descendants(self, root_id: str, kind: EntityKind) -> int:
        """Delete ``root_id`` and its subtree; returns the number of records removed

        The store is committed first. File deletions that fail afterwards are
        logged and leave orphaned files behind, never dangling references.
        """
        kind = EntityKind(kind)
        async with self.store.transaction(Collection.ASSETS, Collection.SUB_ASSETS) as tx:
            records = tx[kind.collection]
            sub_assets = tx[Collection.SUB_ASSETS]
            root = next((r for r in records if r.get("id") == root_id), None)
            if root is None:
                raise NotFoundError(kind.label, root_id)

            if kind is EntityKind.ASSET:
                descendants = find_all_descendants(root_id, None, sub_assets)
                # Components whose parentSubId chain is broken still belong to this asset
                descendant_ids = {d.get("id") for d in descendants}
                descendants.extend(
                    sa for sa in sub_assets
                    if sa.get("parentId") == root_id and sa.get("id") not in descendant_ids
                )
            else:
                descendants = find_all_descendants(root.get("parentId"), root_id, sub_assets)

            removed_ids = {d.get("id") for d in descendants}
            logger.debug(f"Deleting {kind.value} {root_id} ({root.get('name')}) with {len(descendants)} sub-assets")

            # One pass over the snapshot, no per-node deletes
            remaining_subs = [sa for sa in sub_assets if sa.get("id") not in removed_ids]
            if kind is EntityKind.ASSET:
                changes = {
                    Collection.ASSETS: [a for a in records if a.get("id") != root_id],
                    Collection.SUB_ASSETS: remaining_subs,
                }
            else:
                changes = {Collection.SUB_ASSETS: [sa for sa in remaining_subs if sa.get("id") != root_id]}
            await tx.commit(changes)

        removed: List[dict] = [root] + descendants
        paths: List[str] = []
        for record in removed:
            paths.extend(entity_paths(record))
        failures = await self.attachments.delete_many(paths)
        if failures:
            logger.warning(f"{failures} of {len(paths)} files could not be deleted for {kind.value} {root_id}")

        logger.info(f"Deleted {kind.value} {root_id} and {len(descendants)} sub-assets")
        return len(removed)
