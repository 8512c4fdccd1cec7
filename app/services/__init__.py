"""
Inventory core services
"""

from fastapi import Request

from app.core.storage import EntityStore
from app.services.attachments import AttachmentManager
from app.services.deletion import CascadeDeletionEngine
from app.services.duplication import DuplicationEngine, DuplicationResult
from app.services.entities import EntityService
from app.services.resolver import find_all_descendants


class Inventory:
    """Wires the engines to one store and one attachment folder"""

    def __init__(self, data_dir, max_duplicate_count: int = 100, max_bulk_items: int = 100):
        self.store = EntityStore(data_dir)
        self.attachments = AttachmentManager(data_dir)
        self.entities = EntityService(self.store, self.attachments, max_bulk_items=max_bulk_items)
        self.duplication = DuplicationEngine(self.store, self.attachments, max_count=max_duplicate_count)
        self.deletion = CascadeDeletionEngine(self.store, self.attachments)

    def initialize(self) -> None:
        self.store.initialize()
        self.attachments.initialize()


def get_inventory(request: Request) -> Inventory:
    """Dependency to get the application's inventory services"""
    return request.app.state.inventory


__all__ = [
    "AttachmentManager",
    "CascadeDeletionEngine",
    "DuplicationEngine",
    "DuplicationResult",
    "EntityService",
    "Inventory",
    "find_all_descendants",
    "get_inventory",
]
