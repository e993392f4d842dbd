"""Exception hierarchy for Cortex Lab."""


class CortexLabError(Exception):
    """Base class for all Cortex Lab errors."""


class SimulationInputError(CortexLabError, ValueError):
    """Invalid arguments passed to the simulation engine."""


class RandomSourceExhaustedError(CortexLabError):
    """A replayed normal stream ran out of values."""


class MarketDataError(CortexLabError):
    """The market data provider failed or returned nothing usable."""


class InsufficientHistoryError(CortexLabError):
    """Not enough price history to trust a forecast."""

    def __init__(self, symbol: str, available: int, required: int):
        self.symbol = symbol
        self.available = available
        self.required = required
        super().__init__(
            f"Not enough historical data for {symbol}: "
            f"{available} points (need {required})"
        )
