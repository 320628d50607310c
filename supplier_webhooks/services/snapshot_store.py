"""
Inventory snapshot storage.

``InventorySnapshotStore`` is the interface the processor talks to; the
methods are async so a database-backed store can slot in later without the
processor changing. ``InMemorySnapshotStore`` keeps everything in a dict for
the lifetime of the process.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from supplier_webhooks.core.enums import SupplierSource
from supplier_webhooks.schemas.webhook import InventorySnapshot, make_inventory_key


class InventorySnapshotStore(ABC):

    @abstractmethod
    async def get(
        self,
        supplier: SupplierSource,
        style_id: str,
        color_id: str,
        size_id: str,
    ) -> Optional[InventorySnapshot]:
        """Last stored snapshot for the unit, or None"""
        pass

    @abstractmethod
    async def upsert(self, snapshot: InventorySnapshot) -> None:
        """Replace whatever is stored under the snapshot's key"""
        pass

    @abstractmethod
    async def get_all(self) -> List[InventorySnapshot]:
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Drop all state"""
        pass


class InMemorySnapshotStore(InventorySnapshotStore):
    def __init__(self):
        self._snapshots: Dict[str, InventorySnapshot] = {}

    async def get(self, supplier, style_id, color_id, size_id):
        return self._snapshots.get(make_inventory_key(supplier, style_id, color_id, size_id))

    async def upsert(self, snapshot):
        # Last write wins, no merge with the previous entry.
        self._snapshots[snapshot.key] = snapshot

    async def get_all(self):
        return list(self._snapshots.values())

    async def clear(self):
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)
