"""Core mathematics and configuration for the Rebound Edge pricing pipeline.

This package contains the pure building blocks:

- ``interfaces``    — DTOs and the injected ``GameLogRepository`` ABC
- ``errors``        — the pipeline's error taxonomy
- ``rates``         — per-game ORB/DRB Poisson rates from a game log
- ``rebound_model`` — P(TRB ≥ threshold) by ORB/DRB convolution
- ``odds_math``     — fair odds and sportsbook quote conversion
- ``kelly``         — Kelly criterion stake sizing
- ``sport_config``  — per-league constants (data source, tail cut, divisor)

Nothing in this package imports from ``backend.services``.
All modules are side-effect-free and unit-testable in isolation.
"""
