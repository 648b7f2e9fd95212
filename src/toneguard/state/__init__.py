"""Persistence for tone history and benchmark reference data."""

from toneguard.state.store import ToneStore, load_benchmark_catalog

__all__ = ["ToneStore", "load_benchmark_catalog"]
