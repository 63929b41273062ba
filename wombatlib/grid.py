"""A discretised occupancy grid with breadth-first and A* searches."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from operator import attrgetter
from typing import Callable, Iterator, Sequence

Index = tuple[int, int]

_UNVISITED_COST = 1e9


def remap(x: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    """Linearly map ``x`` from one range onto another."""
    return (x - in_min) * (out_max - out_min) / (in_max - in_min) + out_min


@dataclass(frozen=True)
class GridPathNode:
    """A step of a path: the continuous centre of a cell and the cost to reach it."""

    position: tuple[float, float]
    cost: float


@dataclass(eq=False)
class _SearchNode:
    position: Index
    parent: _SearchNode | None
    g_score: float
    f_score: float


def _neighbours(pos: Index) -> Iterator[Index]:
    x, y = pos
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            yield (x + dx, y + dy)


class OccupancyGrid:
    """A rectangle of continuous space split into ``ux`` by ``uy`` cells.

    Cells are addressed as ``(x, y)`` tuples. Anything outside the grid counts
    as occupied.
    """

    def __init__(self, xmin: float, xmax: float, ymin: float, ymax: float, ux: int, uy: int) -> None:
        self.xmin = xmin
        self.xmax = xmax
        self.ymin = ymin
        self.ymax = ymax
        self._cells = [[0] * ux for _ in range(uy)]
        self._cols = ux

    @classmethod
    def from_matrix(cls, xmin, xmax, ymin, ymax, matrix: Sequence[Sequence[int]]) -> OccupancyGrid:
        """Build a grid whose cells are the rows of ``matrix`` (row index is ``y``)."""
        rows = [[1 if cell else 0 for cell in row] for row in matrix]
        cols = len(rows[0]) if rows else 0
        if any(len(row) != cols for row in rows):
            raise ValueError("Matrix rows differ in length")
        grid = cls(xmin, xmax, ymin, ymax, cols, len(rows))
        grid._cells = rows
        return grid

    @property
    def rows(self) -> int:
        return len(self._cells)

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def matrix(self) -> list[list[int]]:
        return [list(row) for row in self._cells]

    def reset(self) -> None:
        self.fill(False)

    def fill(self, value: bool) -> None:
        cell = 1 if value else 0
        for row in self._cells:
            row[:] = [cell] * len(row)

    def fill_with(self, predicate: Callable[[float, float], bool]) -> OccupancyGrid:
        """Mark each cell occupied where ``predicate`` holds at its centre."""
        for y, row in enumerate(self._cells):
            for x in range(len(row)):
                cx, cy = self.center_of((x, y))
                row[x] = 1 if predicate(cx, cy) else 0
        return self

    def load(self, matrix: Sequence[Sequence[int]]) -> None:
        if len(matrix) != self.rows or any(len(row) != self.cols for row in matrix):
            raise ValueError("Rows / Cols Mismatch!")
        self._cells = [[1 if cell else 0 for cell in row] for row in matrix]

    def _in_bounds(self, idx: Index) -> bool:
        x, y = idx
        return 0 <= x < self.cols and 0 <= y < self.rows

    def get(self, idx: Index) -> bool:
        if not self._in_bounds(idx):
            return True
        x, y = idx
        return bool(self._cells[y][x])

    def set(self, idx: Index, occupied: bool) -> None:
        if not self._in_bounds(idx):
            raise IndexError(f"cell {idx} is outside the grid")
        x, y = idx
        self._cells[y][x] = 1 if occupied else 0

    def discretise(self, x: float, y: float) -> Index:
        return (
            int(remap(x, self.xmin, self.xmax, 0.0, float(self.cols))),
            int(remap(y, self.ymin, self.ymax, 0.0, float(self.rows))),
        )

    def center_of(self, idx: Index) -> tuple[float, float]:
        ix, iy = idx
        cols, rows = float(self.cols), float(self.rows)
        cx = (remap(ix, 0.0, cols, self.xmin, self.xmax) + remap(ix + 1, 0.0, cols, self.xmin, self.xmax)) / 2.0
        cy = (remap(iy, 0.0, rows, self.ymin, self.ymax) + remap(iy + 1, 0.0, rows, self.ymin, self.ymax)) / 2.0
        return (cx, cy)

    def closest_valid_node(self, start: Index) -> Index:
        """Breadth-first search for the nearest free cell; ``start`` if none exists."""
        start = tuple(start)
        if all(all(row) for row in self._cells):
            return start
        visited = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            if not self.get(current):
                return current
            for pos in _neighbours(current):
                if pos not in visited:
                    visited.add(pos)
                    queue.append(pos)
        return start

    def a_star(self, start: Index, end: Index, dx_cost: float, dy_cost: float) -> list[GridPathNode]:
        """Path between the free cells closest to ``start`` and ``end``."""
        return self.a_star_strict(
            self.closest_valid_node(start), self.closest_valid_node(end), dx_cost, dy_cost
        )

    def a_star_strict(self, start: Index, end: Index, dx_cost: float, dy_cost: float) -> list[GridPathNode]:
        """Path from ``start`` to ``end``; empty when ``end`` cannot be reached."""
        start, end = tuple(start), tuple(end)
        nodes = {start: _SearchNode(start, None, 0.0, self.cost(start, end, dx_cost, dy_cost))}
        open_set = [nodes[start]]
        f_score = attrgetter("f_score")

        while open_set:
            current = min(open_set, key=f_score)
            open_set.remove(current)
            if current.position == end:
                return self._trace(current)

            for pos in _neighbours(current.position):
                neighbour = nodes.get(pos)
                if neighbour is None:
                    neighbour = nodes[pos] = _SearchNode(pos, None, _UNVISITED_COST, _UNVISITED_COST)
                if pos == current.position or self.get(pos):
                    continue
                tentative = current.g_score + self.cost(current.position, pos, dx_cost, dy_cost)
                if tentative < neighbour.g_score:
                    neighbour.parent = current
                    neighbour.g_score = tentative
                    neighbour.f_score = tentative + self.cost(pos, end, dx_cost, dy_cost)
                    if neighbour not in open_set:
                        open_set.append(neighbour)
        return []

    def _trace(self, node: _SearchNode) -> list[GridPathNode]:
        path = []
        current: _SearchNode | None = node
        while current is not None:
            path.append(GridPathNode(self.center_of(current.position), current.g_score))
            current = current.parent
        path.reverse()
        return path

    def cost(self, start: Index, end: Index, dx_cost: float, dy_cost: float) -> float:
        """Straight-line cost between two cells, weighting each axis separately."""
        x_per_cell = (self.xmax - self.xmin) / self.cols
        y_per_cell = (self.ymax - self.ymin) / self.rows
        x_cost = (end[0] - start[0]) * x_per_cell * dx_cost
        y_cost = (end[1] - start[1]) * y_per_cell * dy_cost
        return math.sqrt(x_cost * x_cost + y_cost * y_cost)