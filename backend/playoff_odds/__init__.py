"""
Fantasy league playoff odds: Monte Carlo simulation, elimination and magic
numbers, and rooting interest analysis.
"""

__version__ = "1.0.0"
