"""Streaming helpers: frame decoding, delta assembly, metrics."""

from .assembler import StreamAssembler, assemble
from .metrics import StreamMetrics
from .sse import DONE, parse_ndjson_line, parse_sse_line

__all__ = ["StreamAssembler", "assemble", "StreamMetrics", "DONE", "parse_sse_line", "parse_ndjson_line"]
