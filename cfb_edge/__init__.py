"""CFB Edge: arbitrage and +EV analysis for college-football odds."""

__version__ = "1.0.0"
