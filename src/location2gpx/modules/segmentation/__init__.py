from .splitter import SegmentSplitter
