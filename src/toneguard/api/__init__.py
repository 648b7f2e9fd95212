"""HTTP API for tone analysis, rewrites, history and benchmarks."""
