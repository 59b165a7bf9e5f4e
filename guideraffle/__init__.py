"""Weighted, non-repeating winner draws for a roster of guides."""
