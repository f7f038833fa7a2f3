"""
Raster Store - bounded in-memory store for uploaded and filtered rasters
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from threading import RLock
from typing import Any, Dict, List, Optional

from core.constants import StoreConstants
from core.exceptions import StoreCapacityError
from core.raster import Raster

logger = logging.getLogger(__name__)


@dataclass
class StoredRaster:
    """Single store entry"""

    id: str
    raster: Raster
    created_at: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)
    access_count: int = 0
    sequence: int = 0

    def describe(self) -> Dict[str, Any]:
        return {
            "raster_id": self.id,
            "width": self.raster.width,
            "height": self.raster.height,
            "size_bytes": self.raster.nbytes,
            "created_at": self.created_at.isoformat(),
            "access_count": self.access_count,
            "metadata": self.metadata,
        }


class RasterStore:
    """LRU store keeping rasters addressable by id"""

    def __init__(
        self,
        max_rasters: int = StoreConstants.DEFAULT_MAX_RASTERS,
        max_memory_mb: float = StoreConstants.DEFAULT_MAX_MEMORY_MB,
    ):
        """
        Initialize Raster Store

        Args:
            max_rasters: Maximum number of rasters to keep
            max_memory_mb: Maximum total sample bytes, in MB
        """
        self.max_rasters = max_rasters
        self.max_bytes = int(max_memory_mb * 1024 * 1024)
        self.entries: "OrderedDict[str, StoredRaster]" = OrderedDict()
        self.total_bytes = 0

        # Statistics
        self.total_stored = 0
        self.eviction_count = 0

        # Thread safety (RLock allows reentrant locking)
        self.lock = RLock()

        logger.info(
            f"Raster Store initialized with max {max_rasters} rasters / {max_memory_mb} MB"
        )

    def store(self, raster: Raster, metadata: Optional[Dict[str, Any]] = None) -> str:
        """
        Add a raster to the store

        Args:
            raster: Raster to keep
            metadata: Optional metadata (source ids, filter mode, ...)

        Returns:
            Raster ID
        """
        if raster.nbytes > self.max_bytes:
            raise StoreCapacityError(raster.nbytes, self.max_bytes)

        raster_id = f"{StoreConstants.RASTER_ID_PREFIX}{uuid.uuid4().hex[:12]}"
        entry = StoredRaster(
            id=raster_id,
            raster=raster,
            created_at=datetime.now(),
            metadata=dict(metadata or {}),
        )

        with self.lock:
            entry.sequence = self.total_stored
            self._make_room(raster.nbytes)
            self.entries[raster_id] = entry
            self.total_bytes += raster.nbytes
            self.total_stored += 1

        logger.debug(f"Stored raster {raster_id} ({raster.width}x{raster.height})")
        return raster_id

    def _make_room(self, incoming_bytes: int):
        """Evict least recently used rasters until the new one fits"""
        while self.entries and (
            len(self.entries) >= self.max_rasters
            or self.total_bytes + incoming_bytes > self.max_bytes
        ):
            evicted_id, evicted = self.entries.popitem(last=False)
            self.total_bytes -= evicted.raster.nbytes
            self.eviction_count += 1
            logger.info(f"Evicted raster {evicted_id} from store")

    def get(self, raster_id: str) -> Optional[Raster]:
        """Get raster by ID, or None if not stored"""
        with self.lock:
            entry = self.entries.get(raster_id)
            if entry is None:
                return None
            entry.access_count += 1
            self.entries.move_to_end(raster_id)
            return entry.raster

    def get_metadata(self, raster_id: str) -> Optional[Dict[str, Any]]:
        """Get description of a stored raster"""
        with self.lock:
            entry = self.entries.get(raster_id)
            return entry.describe() if entry else None

    def has_raster(self, raster_id: str) -> bool:
        with self.lock:
            return raster_id in self.entries

    def delete(self, raster_id: str) -> bool:
        """Remove raster, returns False if it was not stored"""
        with self.lock:
            entry = self.entries.pop(raster_id, None)
            if entry is None:
                return False
            self.total_bytes -= entry.raster.nbytes

        logger.debug(f"Deleted raster {raster_id}")
        return True

    def list_rasters(self) -> List[Dict[str, Any]]:
        """Describe all stored rasters (newest first)"""
        with self.lock:
            entries = list(self.entries.values())

        entries.sort(key=lambda e: e.sequence, reverse=True)
        return [e.describe() for e in entries]

    def get_stats(self) -> Dict[str, Any]:
        """Get store statistics"""
        with self.lock:
            return {
                "count": len(self.entries),
                "max_rasters": self.max_rasters,
                "memory_mb": round(self.total_bytes / (1024 * 1024), 3),
                "max_memory_mb": round(self.max_bytes / (1024 * 1024), 3),
                "total_stored": self.total_stored,
                "evictions": self.eviction_count,
            }

    def clear(self):
        """Remove all rasters"""
        with self.lock:
            self.entries.clear()
            self.total_bytes = 0

            logger.info("Raster store cleared")

    def cleanup(self):
        """Release all rasters on shutdown"""
        self.clear()
