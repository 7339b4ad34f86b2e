import os


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return float(v)
    except ValueError:
        return default


def environment() -> str:
    return os.getenv("ENV", "dev").lower()


def storage_root() -> str:
    return os.getenv("STORAGE_ROOT", "./storage")


def storage_public_url() -> str:
    return os.getenv("STORAGE_PUBLIC_URL", "/files").rstrip("/")


def catalog_batch_size() -> int:
    size = _env_int("CATALOG_BATCH_SIZE", 500)
    return size if size > 0 else 500


def timer_tick_seconds() -> float:
    seconds = _env_float("TIMER_TICK_SECONDS", 1.0)
    return seconds if seconds > 0 else 1.0
