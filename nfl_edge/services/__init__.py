"""Simulation components: strength, weather, possessions, games, calibration."""
