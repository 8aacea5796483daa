import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from hn_sync.errors import ConfigError


load_dotenv(".env", override=False)

DEFAULT_HUB = "https://hacker-news.firebaseio.com/v0/"

BACKENDS = ("file", "sqlite", "postgres")
MODES = ("run_one", "run_many", "sync_data")


def env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise ConfigError(f"Missing required env var: {name}")
    return value


def env_bool(name: str, default: str = "false") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int | None = None) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclass(frozen=True)
class SyncConfig:
    hub_url: str = DEFAULT_HUB
    batch_size: int = 10
    fetch_timeout_s: float = 5.0
    fetch_concurrency: int = 4
    request_timeout_s: float = 20.0
    run_many_limit: int = 5
    start_id: int | None = None
    backend: str = "sqlite"
    store_uri: str = "items.db"
    verify_tls: bool = False
    user_agent: str = "HnSyncBot/0.1"
    metrics_port: int = 9100
    sync_log: bool = True

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigError(f"batch size must be >= 1, got {self.batch_size}")
        if self.fetch_concurrency < 1:
            raise ConfigError(
                f"fetch concurrency must be >= 1, got {self.fetch_concurrency}"
            )
        if self.fetch_timeout_s <= 0:
            raise ConfigError(
                f"fetch timeout must be positive, got {self.fetch_timeout_s}"
            )
        if self.run_many_limit < 1:
            raise ConfigError(
                f"run_many limit must be >= 1, got {self.run_many_limit}"
            )

    @classmethod
    def from_env(cls) -> "SyncConfig":
        return cls(
            hub_url=env("CRAWLER_HUB", DEFAULT_HUB),
            batch_size=env_int("MAX_BATCH_ITEMS", 10),
            fetch_timeout_s=env_float("FETCH_TIMEOUT_S", 5.0),
            fetch_concurrency=env_int("FETCH_CONCURRENCY", 4),
            request_timeout_s=env_float("REQUEST_TIMEOUT_S", 20.0),
            run_many_limit=env_int("RUN_MANY_LIMIT", 5),
            start_id=env_int("SYNC_START_ID"),
            backend=env("STORE_BACKEND", "sqlite"),
            store_uri=env("STORE_URI", "items.db"),
            verify_tls=env_bool("VERIFY_TLS", "false"),
            user_agent=env("HN_USER_AGENT", "HnSyncBot/0.1"),
            metrics_port=env_int("METRICS_PORT", 9100),
            sync_log=env_bool("SYNC_LOG", "true"),
        )

    def with_overrides(self, **overrides: object) -> "SyncConfig":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def check_supported(backend: str, mode: str) -> None:
    if backend not in BACKENDS or mode not in MODES:
        raise ConfigError(
            f"unsupported mode/backend pair: mode={mode!r} backend={backend!r} "
            f"(modes: {', '.join(MODES)}; backends: {', '.join(BACKENDS)})"
        )
