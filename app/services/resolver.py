"""
Descendant resolution over the flat parent-pointer sub-asset collection
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class ChildIndex:
    """Children lookup built once per operation instead of refiltering the collection"""

    def __init__(self, sub_assets: Iterable[dict]):
        self._by_parent_sub: Dict[str, List[dict]] = defaultdict(list)
        self._top_level: Dict[str, List[dict]] = defaultdict(list)
        for sub_asset in sub_assets:
            parent_sub_id = sub_asset.get("parentSubId")
            if parent_sub_id:
                self._by_parent_sub[parent_sub_id].append(sub_asset)
            else:
                self._top_level[sub_asset.get("parentId")].append(sub_asset)

    def children(self, root_asset_id: Optional[str], root_sub_id: Optional[str]) -> List[dict]:
        if root_sub_id:
            return self._by_parent_sub.get(root_sub_id, [])
        return self._top_level.get(root_asset_id, [])


def find_all_descendants(
    root_asset_id: Optional[str],
    root_sub_id: Optional[str],
    sub_assets: Iterable[dict]
) -> List[dict]:
    """Return every sub-asset under a root, in pre-order

    With ``root_sub_id`` the root is that sub-asset; otherwise it is the
    asset's first level of components. Each direct child is followed
    immediately by its own descendants.
    """
    index = ChildIndex(sub_assets)
    result: List[dict] = []
    visited = set()
    if root_sub_id:
        visited.add(root_sub_id)

    # Explicit stack of child iterators keeps deep trees off the call stack
    stack = [iter(index.children(root_asset_id, root_sub_id))]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        child_id = child.get("id")
        if child_id in visited:
            logger.warning(f"Skipping sub-asset {child_id}: already reached, parent chain loops")
            continue
        visited.add(child_id)
        result.append(child)
        stack.append(iter(index.children(root_asset_id, child_id)))

    return result
