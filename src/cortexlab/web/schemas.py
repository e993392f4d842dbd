"""Pydantic request/response schemas for the Cortex Lab API."""

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# --- Base schemas ---


class Meta(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    cached: bool = False


class ApiResponse(BaseModel, Generic[T]):
    data: T
    meta: Meta = Field(default_factory=Meta)


class HealthResponse(BaseModel):
    status: str
    version: str
    cache_type: str


# --- Simulation schemas ---


class PercentileRow(BaseModel):
    day: int = Field(description="Trading-day offset from the start price")
    p05: float
    p25: float
    p50: float
    p75: float
    p95: float


class TerminalStats(BaseModel):
    p05: float
    p25: float
    p50: float
    p75: float
    p95: float
    expected_move_pct: float = Field(description="Median move at the horizon (%)")


class SimulationResult(BaseModel):
    symbol: str | None = None
    start_price: float = Field(description="Live price the paths start from")
    base_volatility: float = Field(description="Annualized volatility from history")
    volatility: float = Field(description="Volatility after the scenario multiplier")
    vol_multiplier: float
    drift: float
    days: int
    num_simulations: int
    input_points_used: int
    terminal: TerminalStats
    rows: list[PercentileRow]
    sample_paths: list[list[float]] = Field(default_factory=list)


class SimulationRequest(BaseModel):
    prices: list[float] = Field(description="Historical closes, oldest first")
    current_price: float | None = Field(None, gt=0, description="Live price; defaults to last close")
    days: int = Field(30, ge=0)
    num_simulations: int = Field(1000, gt=0)
    drift: float | None = Field(None, description="Annualized drift; defaults to configured value")
    vol_multiplier: float = Field(1.0, ge=0)
    seed: int | None = Field(None, ge=0, description="Fixed seed for reproducible runs")
    sample_size: int = Field(5, ge=0, le=50)


# --- Outlook schemas ---


class VolatilityProfileData(BaseModel):
    level: str
    label: str
    volatility_pct: float


class TimelinePoint(BaseModel):
    label: str
    type: str = Field(description="history, bridge or forecast")
    date: str | None = None
    history_price: float | None = None
    history_open: float | None = None
    forecast_price: float | None = None


class OutlookResult(BaseModel):
    symbol: str
    current_price: float
    volatility: float
    volatility_estimated: bool
    profile: VolatilityProfileData
    period_change_pct: float | None = None
    verdict: str = Field(description="ACCUMULATE or CAUTION")
    total_move_pct: float
    target_price: float = Field(description="Median 1Y forecast")
    timeline: list[TimelinePoint]


def to_simulation_result(symbol: str | None, result: dict[str, Any]) -> SimulationResult:
    """Shape an engine result into the API response model."""
    from cortexlab.analysis.sim_models.percentiles import curve_to_rows

    return SimulationResult(
        symbol=symbol,
        start_price=result["start_price"],
        base_volatility=result["base_volatility"],
        volatility=result["volatility"],
        vol_multiplier=result["vol_multiplier"],
        drift=result["drift"],
        days=result["days"],
        num_simulations=result["num_simulations"],
        input_points_used=result["input_points_used"],
        terminal=TerminalStats(**result["terminal"]),
        rows=[PercentileRow(**row) for row in curve_to_rows(result["percentiles"])],
        sample_paths=result["sample_paths"],
    )
