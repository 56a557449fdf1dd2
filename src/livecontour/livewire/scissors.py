"""
Livewire (intelligent scissors) path search.

Builds a single-source shortest-path tree over the pixel grid from a seed
pixel, then answers "cheapest path to pixel P" by walking predecessor links.
The tree is rebuilt from scratch every time the seed moves.

The search is Dijkstra over 4- or 8-connected neighbours. Moving onto a pixel
costs that pixel's field value times the step length (1 for axis steps,
sqrt(2) for diagonals). Frontier entries are ordered by
(cumulative_cost, flat_index), so equal costs expand in raster order and
identical inputs always trace identical paths.
"""

import heapq
import math

from livecontour.config import LivewireConfig
from livecontour.livewire.cost_field import PixelBuffer, build_cost_field
from livecontour.tracer import get_tracer, trace


class InvalidStateError(RuntimeError):
    """Raised when an operation is called in a state that does not allow it."""


_AXIS_STEPS = ((0, -1), (-1, 0), (1, 0), (0, 1))
_DIAGONAL_STEPS = ((-1, -1), (1, -1), (-1, 1), (1, 1))


def _neighbor_offsets(connectivity):
    """(dx, dy, step_length) tuples in a fixed order."""
    if connectivity == 4:
        steps = _AXIS_STEPS
    elif connectivity == 8:
        steps = _AXIS_STEPS + _DIAGONAL_STEPS
    else:
        raise ValueError(f"Connectivity must be 4 or 8, got {connectivity}")

    return tuple(
        (dx, dy, math.sqrt(2.0) if dx and dy else 1.0)
        for dx, dy in steps
    )


def to_pixel_index(point):
    """Round a continuous [x, y] position to the nearest integer pixel index."""
    return int(math.floor(point[0] + 0.5)), int(math.floor(point[1] + 0.5))


class LivewireScissors:
    """
    Shortest-path tree over a cost field.

    Idle until start_search() is called; Rooted(seed) afterwards. Queries
    while Idle raise InvalidStateError.
    """

    def __init__(self, cost_field, config=None):
        config = config or LivewireConfig()

        self._cost_field = cost_field
        self._neighbors = _neighbor_offsets(config.connectivity)
        self._lazy = bool(config.lazy_expansion)
        self._width = cost_field.width
        self._height = cost_field.height
        # flat list for the hot loop; numpy scalar indexing is too slow there
        self._costs = cost_field.values.ravel().tolist()

        self._seed = None
        self._dist = None
        self._pred = None
        self._done = None
        self._frontier = None
        self._expanded = 0

    @classmethod
    def from_raw_pixel_data(cls, data, width, height, window=None, config=None):
        """Build the pixel buffer and its cost field, then wrap them in a search."""
        config = config or LivewireConfig()
        buffer = PixelBuffer(data, width=width, height=height, window=window)
        return cls(build_cost_field(buffer, config), config)

    @property
    def cost_field(self):
        return self._cost_field

    @property
    def seed(self):
        return list(self._seed) if self._seed is not None else None

    @property
    def is_rooted(self):
        return self._seed is not None

    @property
    def expanded_count(self):
        """Number of pixels finalized in the current tree."""
        return self._expanded

    def reset(self):
        """Drop the current tree and return to Idle."""
        self._seed = None
        self._dist = None
        self._pred = None
        self._done = None
        self._frontier = None
        self._expanded = 0

    @trace(label="start_search")
    def start_search(self, seed):
        """
        Root a new shortest-path tree at seed.

        The previous tree is discarded. A seed outside the field raises
        ValueError and leaves the previous tree untouched.
        """
        x, y = to_pixel_index(seed)
        if not self._cost_field.contains(x, y):
            raise ValueError(
                f"Seed {[x, y]} outside cost field {self._width}x{self._height}"
            )

        size = self._width * self._height
        seed_index = y * self._width + x

        self.reset()
        self._dist = [math.inf] * size
        self._pred = [-1] * size
        self._done = [False] * size
        self._dist[seed_index] = 0.0
        self._frontier = [(0.0, seed_index)]
        self._seed = (x, y)

        if not self._lazy:
            self._expand()

        get_tracer().event(
            f"Search rooted at {[x, y]}: expanded={self._expanded}/{size}, lazy={self._lazy}"
        )

    def find_path_to_point(self, target):
        """
        Cheapest path from the seed to target as a list of [x, y] pixels.

        Returns [] when target is outside the field or unreachable.
        """
        if self._seed is None:
            raise InvalidStateError("find_path_to_point called before start_search")

        x, y = to_pixel_index(target)
        if not self._cost_field.contains(x, y):
            return []

        index = y * self._width + x
        if not self._done[index] and self._frontier:
            self._expand(index)
        if not self._done[index]:
            return []

        path = []
        while index != -1:
            py, px = divmod(index, self._width)
            path.append([px, py])
            index = self._pred[index]

        path.reverse()
        return path

    def cumulative_cost(self, point):
        """Cost of the cheapest path from the seed, or None if not finalized."""
        index = self._finalized_index(point)
        return None if index is None else self._dist[index]

    def predecessor(self, point):
        """Previous pixel on the cheapest path, or None for the seed or unreached pixels."""
        index = self._finalized_index(point)
        if index is None or self._pred[index] == -1:
            return None
        py, px = divmod(self._pred[index], self._width)
        return [px, py]

    def _finalized_index(self, point):
        if self._seed is None:
            raise InvalidStateError("No search tree; call start_search first")

        x, y = to_pixel_index(point)
        if not self._cost_field.contains(x, y):
            return None

        index = y * self._width + x
        return index if self._done[index] else None

    def _expand(self, target=None):
        """
        Pop and finalize frontier pixels until target is finalized.

        With target=None the whole reachable grid is expanded. The frontier
        is kept, so a later call resumes exactly where this one stopped.
        """
        heap = self._frontier
        dist = self._dist
        pred = self._pred
        done = self._done
        costs = self._costs
        width = self._width
        height = self._height
        neighbors = self._neighbors
        heappush = heapq.heappush
        heappop = heapq.heappop

        expanded = 0
        while heap:
            d, index = heappop(heap)
            if done[index]:
                continue

            done[index] = True
            expanded += 1
            y, x = divmod(index, width)

            for dx, dy, step in neighbors:
                nx = x + dx
                ny = y + dy
                if nx < 0 or ny < 0 or nx >= width or ny >= height:
                    continue

                neighbor = ny * width + nx
                if done[neighbor]:
                    continue

                nd = d + costs[neighbor] * step
                if nd < dist[neighbor]:
                    dist[neighbor] = nd
                    pred[neighbor] = index
                    heappush(heap, (nd, neighbor))

            if index == target:
                break

        self._expanded += expanded
