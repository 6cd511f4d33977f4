"""Core mathematics and configuration for the NFL Edge simulation engine.

This package contains pure building blocks:

- ``engine_config``: every tuning constant (weights, bands, ladders)
- ``odds_math``: American odds conversion, vig removal, favourites
- ``numeric``: guarded division and clamping
- ``sim_interface``: value types that flow into and out of the engine

Nothing in this package imports from ``nfl_edge.services``.
All modules are side-effect-free and unit-testable in isolation.
"""
