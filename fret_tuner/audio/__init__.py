"""Audio signal path and audio I/O adapters."""
