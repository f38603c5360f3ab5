"""Merge sequentially numbered comic archives in true chapter order."""
