from .grouper import TrackGrouper
