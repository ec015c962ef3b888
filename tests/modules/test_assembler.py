import unittest
from datetime import datetime, timedelta, timezone

from location2gpx.core.point import LocationPoint, Route, TrackKey
from location2gpx.core.segment import Segment
from location2gpx.modules.assembly import TrackAssembler


class TestTrackAssembler(unittest.TestCase):
    def setUp(self):
        self.start_time = datetime(2022, 2, 7, 0, 1, 0, tzinfo=timezone.utc)

    def create_point(self, i, device="AA251"):
        return LocationPoint(
            coordinates=(-26.31832, -48.87 - i / 100.0),
            time=self.start_time + timedelta(minutes=i),
            device_id=device,
        )

    def test_assemble(self):
        seg_a = Segment(points=[self.create_point(0), self.create_point(1)])
        seg_b = Segment(points=[self.create_point(10)])
        seg_c = Segment(points=[self.create_point(2, "BB")])

        collection = TrackAssembler(source="track app").assemble([
            (TrackKey("AA251", Route("JOI123")), [seg_a, seg_b]),
            (TrackKey("BB"), [seg_c]),
        ])

        self.assertEqual(len(collection), 2)
        self.assertEqual(collection.creator, "location2gpx")
        self.assertEqual(collection.point_count, 4)

        first = collection[0]
        self.assertEqual(first.device_id, "AA251")
        self.assertEqual(first.route_id, "JOI123")
        self.assertEqual(first.segments, [seg_a, seg_b])
        self.assertEqual(first.name, "JOI123")
        self.assertEqual(first.description, "Tracked by `AA251`")
        self.assertEqual(first.source, "track app")

        second = collection[1]
        self.assertIsNone(second.route_id)
        self.assertEqual(second.name, "2022-02-07")
        self.assertEqual(second.description, "Tracked by `BB`")

    def test_empty_tracks_are_omitted(self):
        seg = Segment(points=[self.create_point(0)])
        collection = TrackAssembler().assemble([
            (TrackKey("A"), []),
            (TrackKey("B"), [seg]),
            (TrackKey("C"), [Segment(points=[])]),
        ])
        self.assertEqual([t.device_id for t in collection], ["B"])
        self.assertIsNone(collection[0].source)

    def test_assemble_nothing(self):
        collection = TrackAssembler().assemble([])
        self.assertEqual(len(collection), 0)
        self.assertEqual(collection.point_count, 0)


if __name__ == '__main__':
    unittest.main()
