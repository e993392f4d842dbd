import logging
import sys

import click

from cortexlab.config import Settings
from cortexlab.logging_config import setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """Cortex Lab - Monte Carlo GBM price forecasting"""
    setup_logging(log_dir=Settings().log_dir, verbose=verbose)


def _echo_result(result: dict, every: int):
    click.echo(
        f"start={result['start_price']:.4f}  "
        f"vol={result['base_volatility']:.4f} (x{result['vol_multiplier']:.2f} -> {result['volatility']:.4f})  "
        f"drift={result['drift']:.2%}  paths={result['num_simulations']}"
    )
    click.echo(f"{'day':>5} {'p05':>12} {'p25':>12} {'p50':>12} {'p75':>12} {'p95':>12}")

    from cortexlab.analysis.sim_models.percentiles import curve_to_rows

    rows = curve_to_rows(result["percentiles"])
    for row in rows:
        if row["day"] % every == 0 or row["day"] == len(rows) - 1:
            click.echo(
                f"{row['day']:>5} {row['p05']:>12.4f} {row['p25']:>12.4f} "
                f"{row['p50']:>12.4f} {row['p75']:>12.4f} {row['p95']:>12.4f}"
            )
    click.echo(f"Median move at horizon: {result['terminal']['expected_move_pct']:+.2f}%")


@cli.command()
@click.argument("symbol")
@click.option("--days", "-d", type=click.IntRange(min=0), default=None,
              help="Forecast horizon in trading days")
@click.option("--simulations", "-n", type=click.IntRange(min=1), default=None,
              help="Number of simulated paths")
@click.option("--vol-multiplier", "-m", type=click.FloatRange(min=0), default=1.0,
              help="Scenario stress factor applied to volatility")
@click.option("--range", "range_key", default=None,
              help="History range for volatility (1D, 1W, 1M, 3M, 1Y, ALL)")
@click.option("--seed", type=int, default=None, help="Fixed seed for reproducible runs")
@click.option("--every", type=click.IntRange(min=1), default=5, help="Print every Nth day")
def simulate(symbol: str, days: int | None, simulations: int | None, vol_multiplier: float,
             range_key: str | None, seed: int | None, every: int):
    """Forecast percentile bands for SYMBOL from live market data."""
    from cortexlab.analysis.simulation import run_monte_carlo
    from cortexlab.api.market_client import MarketDataClient
    from cortexlab.exceptions import CortexLabError, InsufficientHistoryError

    settings = Settings()
    client = MarketDataClient(
        delay=settings.market_request_delay,
        max_retries=settings.market_max_retries,
        backoff=settings.market_retry_backoff,
    )

    try:
        history = client.get_history(symbol, range_key or settings.volatility_history_range)
        closes = [p["close"] for p in history]
        if len(closes) < settings.simulation_min_history_points:
            raise InsufficientHistoryError(
                symbol, len(closes), settings.simulation_min_history_points
            )
        quote = client.get_quote(symbol)
        result = run_monte_carlo(
            closes,
            quote["price"],
            settings.simulation_default_days if days is None else days,
            num_simulations=simulations or settings.simulation_num_paths,
            drift=settings.simulation_drift,
            vol_multiplier=vol_multiplier,
            seed=seed,
            max_workers=settings.simulation_max_workers,
        )
    except CortexLabError as e:
        click.echo(f"Simulation failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"[{symbol.upper()}]")
    _echo_result(result, every)


@cli.command("simulate-prices")
@click.argument("prices", nargs=-1, type=float)
@click.option("--file", "-f", "price_file", type=click.File("r"), default=None,
              help="File with one closing price per line, oldest first")
@click.option("--current-price", "-p", type=float, default=None,
              help="Live price to start from (default: last close)")
@click.option("--days", "-d", type=click.IntRange(min=0), default=30)
@click.option("--simulations", "-n", type=click.IntRange(min=1), default=1000)
@click.option("--vol-multiplier", "-m", type=click.FloatRange(min=0), default=1.0)
@click.option("--drift", type=float, default=None, help="Annualized drift override")
@click.option("--seed", type=int, default=None)
@click.option("--every", type=click.IntRange(min=1), default=5)
def simulate_prices(prices: tuple[float, ...], price_file, current_price: float | None,
                    days: int, simulations: int, vol_multiplier: float,
                    drift: float | None, seed: int | None, every: int):
    """Forecast from a given closing-price series (no market data lookup)."""
    from cortexlab.analysis.simulation import run_monte_carlo
    from cortexlab.exceptions import SimulationInputError

    series = list(prices)
    if price_file is not None:
        for lineno, line in enumerate(price_file, start=1):
            if not line.strip():
                continue
            try:
                series.append(float(line))
            except ValueError:
                raise click.BadParameter(
                    f"line {lineno}: {line.strip()!r} is not a price", param_hint="--file"
                )

    settings = Settings()
    try:
        result = run_monte_carlo(
            series,
            current_price,
            days,
            num_simulations=simulations,
            drift=settings.simulation_drift if drift is None else drift,
            vol_multiplier=vol_multiplier,
            seed=seed,
        )
    except SimulationInputError as e:
        raise click.BadParameter(str(e))

    _echo_result(result, every)


@cli.command()
@click.argument("symbol")
@click.option("--range", "range_key", default="1M", help="Displayed history range")
@click.option("--seed", type=int, default=None)
def outlook(symbol: str, range_key: str, seed: int | None):
    """Median forecasts at 1D..1Y and the ACCUMULATE/CAUTION verdict."""
    from cortexlab.analysis.simulation import assess_outlook
    from cortexlab.api.market_client import MarketDataClient
    from cortexlab.exceptions import CortexLabError

    settings = Settings()
    client = MarketDataClient(
        delay=settings.market_request_delay,
        max_retries=settings.market_max_retries,
        backoff=settings.market_retry_backoff,
    )

    try:
        history = client.get_history(symbol, range_key)
        baseline = client.get_history(symbol, settings.volatility_history_range)
        quote = client.get_quote(symbol)
        result = assess_outlook(
            history,
            quote["price"],
            volatility_prices=[p["close"] for p in baseline],
            drift=settings.simulation_drift,
            min_history_points=settings.simulation_min_history_points,
            seed=seed,
        )
    except CortexLabError as e:
        click.echo(f"Outlook failed: {e}", err=True)
        sys.exit(1)

    profile = result["profile"]
    click.echo(f"[{symbol.upper()}] {quote['price']:.2f}  {profile['label']} ({profile['volatility_pct']:.1f}%)")
    for point in result["timeline"]:
        if point["type"] == "forecast":
            click.echo(f"  {point['label']:>4}: {point['forecast_price']:.2f}")
    click.echo(f"{result['verdict']}  ({result['total_move_pct']:+.1f}% to 1Y target {result['target_price']:.2f})")


if __name__ == "__main__":
    cli()
