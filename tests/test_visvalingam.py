import unittest
from datetime import datetime, timedelta, timezone

from location2gpx.core.errors import InvalidConfiguration
from location2gpx.core.point import LocationPoint
from location2gpx.core.segment import Segment
from location2gpx.modules.simplification import VisvalingamSimplifier, triangle_area


class TestVisvalingamSimplifier(unittest.TestCase):
    def setUp(self):
        self.start_time = datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def create_point(self, i, lat, lon, elevation=None, speed=None):
        return LocationPoint(
            coordinates=(lat, lon),
            time=self.start_time + timedelta(minutes=i),
            device_id="obj1",
            elevation=elevation,
            speed=speed,
        )

    def zigzag(self, n):
        return [
            self.create_point(i, float(i % 2), float(i), elevation=100.0 + i, speed=float(i))
            for i in range(n)
        ]

    def test_triangle_area(self):
        p1 = self.create_point(0, 0.0, 0.0)
        p2 = self.create_point(1, 2.0, 1.0)
        p3 = self.create_point(2, 0.0, 2.0)
        self.assertEqual(triangle_area(p1, p2, p3), 2.0)
        self.assertEqual(triangle_area(p1, p1, p3), 0.0)

    def test_simplify_empty(self):
        self.assertEqual(VisvalingamSimplifier(1.0).simplify([]), [])

    def test_short_segments_unchanged(self):
        simplifier = VisvalingamSimplifier(1000.0)
        points = self.zigzag(2)
        self.assertEqual(simplifier.simplify(points), points)
        self.assertEqual(simplifier.simplify(points[:1]), points[:1])

    def test_collinear_points(self):
        # A straight line: all interior triangles have zero area
        points = [self.create_point(i, float(i), float(i)) for i in range(5)]
        result = VisvalingamSimplifier(1e-9).simplify(points)
        self.assertEqual(result, [points[0], points[-1]])

    def test_disabled_is_identity(self):
        points = self.zigzag(10)
        for tolerance in (None, 0, 0.0):
            simplifier = VisvalingamSimplifier(tolerance)
            self.assertFalse(simplifier.enabled)
            result = simplifier.simplify(points)
            self.assertEqual(result, points)

            segment = Segment(points=points)
            self.assertIs(simplifier.simplify_segment(segment), segment)

    def test_keeps_peak(self):
        points = [
            self.create_point(0, 0.0, 0.0),
            self.create_point(1, 0.1, 1.0),
            self.create_point(2, 2.0, 2.0),
            self.create_point(3, 0.1, 3.0),
            self.create_point(4, 0.0, 4.0),
        ]
        result = VisvalingamSimplifier(1.0).simplify(points)
        self.assertEqual(result, [points[0], points[2], points[4]])

    def test_equal_areas_remove_earliest_first(self):
        # Every interior point starts with area 1.0
        points = [self.create_point(i, float(i % 2), float(i)) for i in range(5)]
        result = VisvalingamSimplifier(1.5).simplify(points)
        self.assertEqual(result, [points[0], points[3], points[4]])

    def test_large_tolerance_keeps_endpoints(self):
        points = self.zigzag(50)
        result = VisvalingamSimplifier(1e6).simplify(points)
        self.assertEqual(result, [points[0], points[-1]])

    def test_endpoints_and_subset(self):
        points = [
            self.create_point(i, (i * 7 % 11) / 10.0, i / 3.0, elevation=float(i), speed=i / 2.0)
            for i in range(40)
        ]
        result = VisvalingamSimplifier(0.05).simplify(points)

        self.assertIs(result[0], points[0])
        self.assertIs(result[-1], points[-1])
        self.assertLess(len(result), len(points))

        # Retained points are the original objects, in original order
        indexes = [next(i for i, p in enumerate(points) if p is r) for r in result]
        self.assertEqual(indexes, sorted(indexes))
        for i, r in zip(indexes, result):
            self.assertEqual(r.elevation, float(i))
            self.assertEqual(r.speed, i / 2.0)

    def test_idempotence(self):
        points = [self.create_point(i, (i * 7 % 11) / 10.0, i / 3.0) for i in range(40)]
        simplifier = VisvalingamSimplifier(0.05)
        once = simplifier.simplify(points)
        twice = simplifier.simplify(once)
        self.assertEqual(once, twice)

    def test_simplify_segment(self):
        points = [self.create_point(i, float(i), float(i)) for i in range(5)]
        segment = VisvalingamSimplifier(0.5).simplify_segment(Segment(points=points))
        self.assertEqual(segment.points, [points[0], points[-1]])

    def test_invalid_tolerance(self):
        for tolerance in (-1.0, "abc", float("nan"), True):
            with self.assertRaises(InvalidConfiguration, msg=repr(tolerance)):
                VisvalingamSimplifier(tolerance)


if __name__ == '__main__':
    unittest.main()
