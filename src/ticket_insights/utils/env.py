"""Environment variable utility functions for ticket insights."""

import os


def is_env_ssl_verify(env_var_name: str, default: str = "true") -> bool:
    """Check SSL verification setting with secure defaults.

    Defaults to true unless explicitly set to false values.

    Args:
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True unless explicitly set to false values
    """
    return os.getenv(env_var_name, default).strip().lower() not in ("false", "0", "no")


def getenv_list(env_var_name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Read a comma-separated environment variable as a tuple of strings.

    Blank entries are dropped. An unset or blank variable yields `default`.
    """
    raw = os.getenv(env_var_name)
    if raw is None or not raw.strip():
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def getenv_int(env_var_name: str, default: int) -> int:
    """Read an integer environment variable.

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    raw = os.getenv(env_var_name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as e:
        msg = f"Invalid {env_var_name}: '{raw}' is not an integer"
        raise ValueError(msg) from e


def getenv_float(env_var_name: str, default: float) -> float:
    """Read a float environment variable.

    Raises:
        ValueError: If the variable is set but is not a number
    """
    raw = os.getenv(env_var_name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as e:
        msg = f"Invalid {env_var_name}: '{raw}' is not a number"
        raise ValueError(msg) from e
