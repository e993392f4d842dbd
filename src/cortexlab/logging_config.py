import logging
import logging.config
import os

LOG_FILENAME = "cortexlab.log"

# Third-party loggers that report every HTTP round trip to the quote provider
PROVIDER_LOGGERS = ("yfinance", "urllib3", "peewee")


def build_logging_config(log_dir: str = "logs", verbose: bool = False) -> dict:
    """dictConfig for the CLI: console for progress, rotating file for forecasts.

    ``verbose`` lowers the console and root levels to DEBUG, which surfaces
    the engine's degenerate-input messages (zero volatility, skipped
    forecast steps, fallback volatility). Provider chatter stays at WARNING
    either way.
    """
    level = "DEBUG" if verbose else "INFO"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
            "forecast_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": os.path.join(log_dir, LOG_FILENAME),
                "maxBytes": 5_242_880,
                "backupCount": 3,
                "formatter": "standard",
                "level": "DEBUG",
            },
        },
        "loggers": {
            **{name: {"level": "WARNING"} for name in PROVIDER_LOGGERS},
            "cortexlab": {"level": "DEBUG" if verbose else "INFO"},
        },
        "root": {
            "level": level,
            "handlers": ["console", "forecast_file"],
        },
    }


def setup_logging(log_dir: str = "logs", verbose: bool = False):
    os.makedirs(log_dir, exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_dir, verbose))
