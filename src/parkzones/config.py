"""Client configuration for parkzones."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from parkzones.exceptions import ParkZonesConfigError

_ID_STRATEGIES = frozenset({"index", "address"})
_GAP_BANDS = frozenset({"good", "limited"})


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ParkZonesConfigError(f"{env_key} must be a number, got {value!r}") from exc


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ParkZonesConfigError(f"{env_key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class ParkZonesConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Feed server base URL (scheme + host, no trailing slash).
    feed_path : str
        Path of the zone list endpoint.
    refresh_interval : float
        Seconds between automatic refresh cycles.
    request_timeout : float
        Total timeout in seconds for a single feed request.
    default_city : str
        City assigned to zones whose address carries no city part.
    default_country : str
        Country assigned to zones whose address carries no country part.
    id_strategy : str
        ``"index"`` keys zones as ``zone-{n}`` by feed position,
        ``"address"`` derives the key from the normalized address.
    gap_band : str
        Band for zones between 30% and 50% availability when the feed
        sends no type hint (``"good"`` or ``"limited"``).
    traffic_seed : int or None
        Seed for the traffic profile generator. ``None`` seeds from time.
    """

    base_url: str = "http://localhost:3000"
    feed_path: str = "/api/parking"
    refresh_interval: float = 30.0
    request_timeout: float = 10.0
    default_city: str = "Timișoara"
    default_country: str = "Romania"
    id_strategy: str = "index"
    gap_band: str = "good"
    traffic_seed: int | None = None

    def __post_init__(self) -> None:
        if self.refresh_interval <= 0:
            raise ParkZonesConfigError("refresh_interval must be positive")
        if self.request_timeout <= 0:
            raise ParkZonesConfigError("request_timeout must be positive")
        if self.id_strategy not in _ID_STRATEGIES:
            raise ParkZonesConfigError(f"id_strategy must be one of {sorted(_ID_STRATEGIES)}")
        if self.gap_band not in _GAP_BANDS:
            raise ParkZonesConfigError(f"gap_band must be one of {sorted(_GAP_BANDS)}")
        # Normalize so endpoint joins never produce a double slash.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if not self.feed_path.startswith("/"):
            object.__setattr__(self, "feed_path", f"/{self.feed_path}")

    @property
    def feed_url(self) -> str:
        return f"{self.base_url}{self.feed_path}"

    @classmethod
    def from_env(cls, **overrides: Any) -> ParkZonesConfig:
        """Create configuration from environment variables.

        Reads optional ``PARKZONES_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ParkZonesConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PARKZONES_BASE_URL": "base_url",
            "PARKZONES_FEED_PATH": "feed_path",
            "PARKZONES_DEFAULT_CITY": "default_city",
            "PARKZONES_DEFAULT_COUNTRY": "default_country",
            "PARKZONES_ID_STRATEGY": "id_strategy",
            "PARKZONES_GAP_BAND": "gap_band",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        # Numeric fields, handled separately
        interval_env = env.get("PARKZONES_REFRESH_INTERVAL")
        if interval_env is not None and "refresh_interval" not in overrides:
            config_kwargs["refresh_interval"] = _env_float("PARKZONES_REFRESH_INTERVAL", interval_env)

        timeout_env = env.get("PARKZONES_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("PARKZONES_REQUEST_TIMEOUT", timeout_env)

        seed_env = env.get("PARKZONES_TRAFFIC_SEED")
        if seed_env is not None and "traffic_seed" not in overrides:
            config_kwargs["traffic_seed"] = _env_int("PARKZONES_TRAFFIC_SEED", seed_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
