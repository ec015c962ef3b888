from .visvalingam import VisvalingamSimplifier, triangle_area
