from .assembler import TrackAssembler
