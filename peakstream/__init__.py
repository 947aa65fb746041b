"""Simulated sensor readings streamed to live peak detection dashboards"""

__version__ = "1.0.0"
