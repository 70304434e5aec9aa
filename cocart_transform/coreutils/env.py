from dotenv import load_dotenv
import os

load_dotenv()  # take environment variables from .env

TRUTHY_VALUES = {"1", "true", "yes", "on"}


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    return os.getenv(key, default)


def env_bool(key: str, default: bool = False) -> bool:
    """Read an environment variable as a boolean flag."""
    value = env_get(key)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUTHY_VALUES
