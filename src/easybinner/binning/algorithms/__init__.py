"""Algorithms used by the binning engine.

Pure python/numpy implementations of each pipeline stage: bin planning,
binning, aggregation and the optional normal curve overlay.
"""
