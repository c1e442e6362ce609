"""GUI adapter layer.

This package provides thin Qt-shaped adapters over the records engine.

Notes
-----
Adapters exist to:
- keep widgets free of storage details,
- run every RecordStore call on one worker thread (single writer),
- translate engine domain errors into user-visible messages.
"""
