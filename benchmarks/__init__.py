"""
Benchmark suite for jvariant parsing performance.

Times ``jvariant.loads`` and ``jvariant.parse`` against the standard library
json module, orjson and ujson on generated documents.
"""
