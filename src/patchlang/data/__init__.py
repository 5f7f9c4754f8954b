"""Data files shipped with patchlang (the default ``ops.map``)."""
