from .compression import segments_compression_ratio
