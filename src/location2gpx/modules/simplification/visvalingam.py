from dataclasses import dataclass, field
from typing import List, Optional
import heapq
import math

from location2gpx.core.errors import InvalidConfiguration
from location2gpx.core.point import LocationPoint
from location2gpx.core.segment import Segment


@dataclass(order=True)
class PriorityObject:
    priority: float
    # Equal areas pop the earliest point first
    index: int


class _Node:
    def __init__(self, point: LocationPoint, index: int):
        self.point = point
        self.index = index
        self.prev: Optional['_Node'] = None
        self.next: Optional['_Node'] = None
        self.area = float('inf')
        self.removed = False


def triangle_area(p1: LocationPoint, p2: LocationPoint, p3: LocationPoint) -> float:
    """
    Area of the triangle p1-p2-p3 in the (lon, lat) plane, in square degrees.
    """
    return abs(
        (p2.lon - p1.lon) * (p3.lat - p1.lat)
        - (p3.lon - p1.lon) * (p2.lat - p1.lat)
    ) / 2.0


def validate_tolerance(tolerance) -> Optional[float]:
    if tolerance is None:
        return None
    if isinstance(tolerance, bool) or not isinstance(tolerance, (int, float)):
        raise InvalidConfiguration(f"Simplification tolerance must be a number, got {tolerance!r}")
    if math.isnan(tolerance) or tolerance < 0:
        raise InvalidConfiguration(f"Simplification tolerance must be zero or positive, got {tolerance!r}")
    return float(tolerance)


class VisvalingamSimplifier:
    def __init__(self, tolerance: Optional[float] = None):
        """
        Initialize the simplifier with an area tolerance.

        Args:
            tolerance: minimum effective area (square degrees) a point needs to
                survive. None or 0 disables simplification.
        """
        self.tolerance = validate_tolerance(tolerance)

    @property
    def enabled(self) -> bool:
        return bool(self.tolerance)

    def simplify(self, points: List[LocationPoint]) -> List[LocationPoint]:
        """
        Simplifies a list of points with the Visvalingam-Whyatt algorithm.
        Returns the surviving subset of the original points, in their original
        order. First and last points are always kept.
        """
        if not self.enabled or len(points) < 3:
            return list(points)

        nodes: List[_Node] = [_Node(p, i) for i, p in enumerate(points)]
        for prev_node, next_node in zip(nodes, nodes[1:]):
            prev_node.next = next_node
            next_node.prev = prev_node

        # Priority queue to efficiently find the point with minimum effective area
        pq: List[PriorityObject] = []
        for node in nodes[1:-1]:
            self._update_area(node, pq)

        while pq:
            item = heapq.heappop(pq)
            node = nodes[item.index]

            # Lazy removal: skip entries that were superseded or already dropped
            if node.removed or node.area != item.priority:
                continue
            if item.priority >= self.tolerance:
                break

            self._remove_node(node, pq)

        result = []
        curr = nodes[0]
        while curr:
            result.append(curr.point)
            curr = curr.next

        return result

    def simplify_segment(self, segment: Segment) -> Segment:
        if not self.enabled:
            return segment
        return Segment(points=self.simplify(segment.points))

    def _remove_node(self, node: _Node, pq: List[PriorityObject]):
        node.removed = True
        prev_node = node.prev
        next_node = node.next

        prev_node.next = next_node
        next_node.prev = prev_node

        # Both neighbors now form a different triangle
        if prev_node.prev:
            self._update_area(prev_node, pq)
        if next_node.next:
            self._update_area(next_node, pq)

    def _update_area(self, node: _Node, pq: List[PriorityObject]):
        node.area = triangle_area(node.prev.point, node.point, node.next.point)
        heapq.heappush(pq, PriorityObject(node.area, node.index))
