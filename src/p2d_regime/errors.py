"""
P2D REGIME - Errors
"""


class InvalidScenario(ValueError):
    """Scenario field outside its enumerated domain. A programming error, not retryable."""
