from .normalizer import FieldMapping, PointNormalizer
