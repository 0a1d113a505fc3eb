"""Internal helpers (I/O). Not part of the public API."""
