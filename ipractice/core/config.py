import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_float(value: str | None, default: float = 0.0) -> float:
    if value is None or not value.strip():
        return default
    return float(value.strip())


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ipractice.db")
SQL_ECHO = _get_bool(os.getenv("SQL_ECHO"), default=False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), default=["http://localhost:5173"])

# Chance that a cancellation is aborted on purpose. 0.6 reproduces the old demo behaviour.
CANCEL_FAULT_PROBABILITY = _get_float(os.getenv("CANCEL_FAULT_PROBABILITY"), default=0.0)


def validate_runtime_config() -> None:
    if not 0.0 <= CANCEL_FAULT_PROBABILITY <= 1.0:
        raise RuntimeError("CANCEL_FAULT_PROBABILITY must be between 0 and 1.")
    if APP_ENV.lower() == "production" and CANCEL_FAULT_PROBABILITY > 0:
        raise RuntimeError("CANCEL_FAULT_PROBABILITY must be 0 in production.")
