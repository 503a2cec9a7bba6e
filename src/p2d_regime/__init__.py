"""
P2D REGIME - Volume-Rising Scenario Reference Table

P2D answers one question only:
"Given a combination of discrete indicator states at the moment volume
turns rising, what is the directional bias and is it worth trading?"

Design Principles:
- Finite, fully enumerated state space (648 scenarios)
- No live data, no forecasting
- Deterministic, rule-based scoring
- Discrete outputs only (bias / strength / trade action)
"""

__version__ = "1.0.0"
