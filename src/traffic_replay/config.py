"""Runtime configuration for traffic_replay."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from traffic_replay._constants import (
    CAPTURE_RANGE_NM,
    CHANNEL_CAPACITY,
    EVENT_POST_TIME_MINUTES,
    EVENT_PRE_TIME_MINUTES,
    MAX_POLL_DELAY_CREDIT,
    POLL_INTERVAL,
    RETRY_DELAY,
    STATUS_URL,
)
from traffic_replay.exceptions import ReplayConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class CaptureConfig:
    """Capture run configuration.

    Parameters
    ----------
    output_dir : Path
        Root directory; each event gets a ``<slug>/`` folder below it.
    airports_path : Path
        FAA ``APT_BASE.csv`` style reference airport file.
    event_path : Path
        TOML event definition.
    status_url : str
        VATSIM status document used to discover the datafeed URL.
    datafeed_url : str or None
        Explicit datafeed URL.  When set, endpoint discovery is skipped.
    capture_range_nm : float
        Relevance radius around each scope airport in nautical miles.
    pre_roll_minutes : int
        Minutes captured before the advertised start time.
    post_roll_minutes : int
        Minutes captured after the advertised end time.
    channel_capacity : int
        Number of snapshots the poller may queue ahead of the consumer.
    poll_interval : float
        Target seconds between forwarded snapshots.
    max_poll_delay_credit : float
        Upper bound on how much of ``poll_interval`` one iteration may
        consume before the pacing sleep stops shrinking.
    retry_delay : float
        Seconds to wait after a failed, duplicate or unparsable poll.
    request_timeout : float
        Total HTTP timeout per feed request in seconds.
    update_index : bool
        Upsert the event into ``<output_dir>/events.json`` after
        consolidation.
    log_level : str
        Level name for the ``traffic_replay`` logger.
    log_json : bool
        Emit JSON lines instead of plain text log records.
    """

    output_dir: Path = Path(".")
    airports_path: Path = Path("APT_BASE.csv")
    event_path: Path = Path("config.toml")
    status_url: str = STATUS_URL
    datafeed_url: str | None = None
    capture_range_nm: float = CAPTURE_RANGE_NM
    pre_roll_minutes: int = EVENT_PRE_TIME_MINUTES
    post_roll_minutes: int = EVENT_POST_TIME_MINUTES
    channel_capacity: int = CHANNEL_CAPACITY
    poll_interval: float = POLL_INTERVAL
    max_poll_delay_credit: float = MAX_POLL_DELAY_CREDIT
    retry_delay: float = RETRY_DELAY
    request_timeout: float = 30.0
    update_index: bool = True
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self) -> None:
        for name in ("output_dir", "airports_path", "event_path"):
            value = getattr(self, name)
            if not isinstance(value, Path):
                object.__setattr__(self, name, Path(value))
        if self.channel_capacity < 1:
            raise ReplayConfigError(f"channel_capacity must be at least 1, got {self.channel_capacity}")
        if self.capture_range_nm < 0:
            raise ReplayConfigError(f"capture_range_nm must not be negative, got {self.capture_range_nm}")
        if self.pre_roll_minutes < 0 or self.post_roll_minutes < 0:
            raise ReplayConfigError("pre/post roll minutes must not be negative")
        if not 0 <= self.max_poll_delay_credit <= self.poll_interval:
            raise ReplayConfigError("max_poll_delay_credit must be between 0 and poll_interval")

    @classmethod
    def from_env(cls, **overrides: Any) -> CaptureConfig:
        """Create configuration from environment variables.

        Reads optional ``REPLAY_*`` variables.  Explicit keyword arguments
        override environment values; ``None`` overrides are ignored so CLI
        flags that were not given fall through to the environment.

        Raises
        ------
        ReplayConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ
        overrides = {key: value for key, value in overrides.items() if value is not None}

        _ENV_STR_MAP = {
            "REPLAY_OUTPUT_DIR": "output_dir",
            "REPLAY_AIRPORTS_PATH": "airports_path",
            "REPLAY_EVENT_PATH": "event_path",
            "REPLAY_STATUS_URL": "status_url",
            "REPLAY_DATAFEED_URL": "datafeed_url",
            "REPLAY_LOG_LEVEL": "log_level",
        }
        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "REPLAY_CAPTURE_RANGE_NM": ("capture_range_nm", float),
            "REPLAY_PRE_ROLL_MINUTES": ("pre_roll_minutes", int),
            "REPLAY_POST_ROLL_MINUTES": ("post_roll_minutes", int),
            "REPLAY_CHANNEL_CAPACITY": ("channel_capacity", int),
            "REPLAY_POLL_INTERVAL": ("poll_interval", float),
            "REPLAY_MAX_POLL_DELAY_CREDIT": ("max_poll_delay_credit", float),
            "REPLAY_RETRY_DELAY": ("retry_delay", float),
            "REPLAY_REQUEST_TIMEOUT": ("request_timeout", float),
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, (field_name, caster) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = caster(val)
            except ValueError as exc:
                raise ReplayConfigError(f"{env_key} is not a valid {caster.__name__}: {val!r}") from exc

        if "update_index" not in overrides:
            config_kwargs["update_index"] = _env_bool(env.get("REPLAY_UPDATE_INDEX"), True)
        if "log_json" not in overrides:
            config_kwargs["log_json"] = _env_bool(env.get("REPLAY_LOG_JSON"), False)

        config_kwargs.update(overrides)
        if "max_poll_delay_credit" not in config_kwargs and "poll_interval" in config_kwargs:
            # A shorter interval caps the default credit.
            config_kwargs["max_poll_delay_credit"] = min(MAX_POLL_DELAY_CREDIT, config_kwargs["poll_interval"])

        return cls(**config_kwargs)
