"""Core odds mathematics for the CFB Edge betting framework.

This package contains pure, framework-agnostic building blocks:

- ``odds_math``: odds conversion, implied probability, EV percentage
- ``quotes``: the ``Quote`` record and market/side vocabulary
- ``arbitrage``: cross-book arbitrage pairing and ranking
- ``stake``: equal-payout stake allocation
- ``ev``: consensus fair price and +EV detection

Nothing in this package imports from ``cfb_edge.services`` or the API.
All modules are side-effect-free and unit-testable in isolation.
"""
