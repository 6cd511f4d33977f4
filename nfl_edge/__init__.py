"""NFL Edge: Monte Carlo game simulation calibrated to the betting market.

Public entry points live in :mod:`nfl_edge.services.monte_carlo`::

    from nfl_edge.services.monte_carlo import MonteCarloOrchestrator

    result = MonteCarloOrchestrator().run(home, away, market, seed=42)
"""

__version__ = "0.1.0"
