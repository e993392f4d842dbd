from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CX_",
    )

    # Market data provider
    market_request_delay: float = 0.5
    market_max_retries: int = 3
    market_retry_backoff: float = 2.0
    volatility_history_range: str = "1Y"

    # Logging
    log_dir: str = "logs"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # API Server
    cors_origins: list[str] = ["http://localhost:3000"]

    # Cache (history responses only)
    cache_ttl: int = 300  # seconds

    # Monte Carlo simulation
    simulation_num_paths: int = 1000
    simulation_default_days: int = 30
    simulation_drift: float = 0.10  # fixed annual drift, not calibrated
    simulation_sample_paths: int = 5
    simulation_min_history_points: int = 10

    # Request bounds (num_paths x days is the wall-clock budget)
    simulation_max_days: int = 1825
    simulation_max_paths: int = 20000

    # Parallelization
    simulation_max_workers: int = 1
