from .gpx import to_gpx_tree, write_gpx
