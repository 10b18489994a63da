from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, List, Tuple

from pygame.math import Vector2

if TYPE_CHECKING:
    from .entities import Agent, Blob

GridEntry = Tuple["Agent", "Blob"]


class SpatialGrid:
    """Uniform bucket grid of blobs, rebuilt once per tick."""

    def __init__(self, cell_size: float) -> None:
        self._cell_size = cell_size
        self._cells: Dict[Tuple[int, int], List[GridEntry]] = {}
        self._active_keys: List[Tuple[int, int]] = []

    @property
    def cell_size(self) -> float:
        return self._cell_size

    def build_neighbor_cell_offsets(self, radius: float) -> List[Tuple[int, int]]:
        cell_range = int(math.ceil(radius / self._cell_size))
        return [(dx, dy) for dx in range(-cell_range, cell_range + 1) for dy in range(-cell_range, cell_range + 1)]

    def clear(self) -> None:
        for key in self._active_keys:
            bucket = self._cells.get(key)
            if bucket:
                bucket.clear()
        self._active_keys.clear()

    def insert(self, agent: "Agent", blob: "Blob") -> None:
        key = self._cell_key(blob.position)
        bucket = self._cells.get(key)
        if bucket is None:
            bucket = []
            self._cells[key] = bucket
            self._active_keys.append(key)
        elif not bucket:
            # Bucket survived the last clear(); mark it active again.
            self._active_keys.append(key)
        bucket.append((agent, blob))

    def collect_neighbors_precomputed(
        self,
        position: Vector2,
        cell_offsets: List[Tuple[int, int]],
        radius: float,
        out_entries: List[GridEntry],
        out_dist: List[float],
        exclude_id: str | None = None,
    ) -> None:
        """
        Fill the buffers with (agent, blob) pairs strictly closer than `radius` to `position`.

        Blobs owned by `exclude_id` are skipped. Callers own the buffers.
        """

        out_entries.clear()
        out_dist.clear()
        base_key = self._cell_key(position)
        pos_x = position.x
        pos_y = position.y
        cells = self._cells

        for dx, dy in cell_offsets:
            bucket = cells.get((base_key[0] + dx, base_key[1] + dy))
            if not bucket:
                continue
            for entry in bucket:
                agent, blob = entry
                if exclude_id is not None and agent.id == exclude_id:
                    continue
                distance = math.hypot(pos_x - blob.position.x, pos_y - blob.position.y)
                if distance < radius:
                    out_entries.append(entry)
                    out_dist.append(distance)

    def _cell_key(self, position: Vector2) -> Tuple[int, int]:
        return (int(position.x // self._cell_size), int(position.y // self._cell_size))
