import os

SCHEMA_ENV_VAR = "SCHEMA_JSON"


def get_schema_path() -> str | None:
    """Path to the schema file or directory, taken from ``SCHEMA_JSON``."""
    path = os.getenv(SCHEMA_ENV_VAR, "").strip()
    return path or None
