"""Connection settings for the Redis bit store.

Deployments describe the connection either as one URL
(``redis://:password@127.0.0.1:6379/0``) or as separate host, port and
db fields. Both shapes parse into the same StoreSettings, so the rest of
the package only ever sees one configuration surface.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

from netbloom.errors import ConfigurationError

DEFAULT_URL = "redis://127.0.0.1:6379/0"
_SCHEMES = ("redis", "rediss")


@dataclass(frozen=True, slots=True)
class StoreSettings:
    """Where the bit arrays live.

    Attributes:
        host: Redis host name or address
        port: Redis port
        db: logical database index
        username: ACL user name (Redis 6+), None for the default user
        password: password, None for no AUTH
        ssl: use TLS (``rediss://``)
        socket_timeout: seconds before a request fails with StoreUnavailable
    """
    host: str = "127.0.0.1"
    port: int = 6379
    db: int = 0
    username: str | None = None
    password: str | None = None
    ssl: bool = False
    socket_timeout: float | None = 5.0

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigurationError("redis host must be non-empty")
        if not (0 < self.port < 65536):
            raise ConfigurationError(f"redis port out of range: {self.port}")
        if self.db < 0:
            raise ConfigurationError(f"redis db must be non-negative, got {self.db}")
        if self.socket_timeout is not None and self.socket_timeout <= 0:
            raise ConfigurationError(
                f"socket_timeout must be positive, got {self.socket_timeout}"
            )

    @classmethod
    def from_url(cls, url: str, socket_timeout: float | None = 5.0) -> StoreSettings:
        """Parse ``redis[s]://[user][:password]@host[:port][/db]``."""
        parts = urlsplit(url)
        if parts.scheme not in _SCHEMES:
            raise ConfigurationError(
                f"unsupported scheme {parts.scheme!r} in {url!r}; use redis:// or rediss://"
            )
        try:
            port = 6379 if parts.port is None else parts.port
        except ValueError as exc:
            raise ConfigurationError(f"invalid port in {url!r}") from exc
        path = parts.path.lstrip("/")
        try:
            db = int(path) if path else 0
        except ValueError:
            raise ConfigurationError(f"invalid db index {path!r} in {url!r}") from None
        return cls(
            host=parts.hostname or "127.0.0.1",
            port=port,
            db=db,
            username=unquote(parts.username) if parts.username else None,
            password=unquote(parts.password) if parts.password else None,
            ssl=parts.scheme == "rediss",
            socket_timeout=socket_timeout,
        )

    @classmethod
    def from_env(cls, prefix: str = "NETBLOOM_") -> StoreSettings:
        """Read ``{prefix}REDIS_URL``, falling back to the separate fields."""
        url = os.getenv(f"{prefix}REDIS_URL")
        if url:
            return cls.from_url(url)
        try:
            port = int(os.getenv(f"{prefix}REDIS_PORT", "6379"))
            db = int(os.getenv(f"{prefix}REDIS_DB", "0"))
        except ValueError as exc:
            raise ConfigurationError(f"invalid {prefix}REDIS_PORT or {prefix}REDIS_DB") from exc
        return cls(
            host=os.getenv(f"{prefix}REDIS_HOST", "127.0.0.1"),
            port=port,
            db=db,
            username=os.getenv(f"{prefix}REDIS_USERNAME") or None,
            password=os.getenv(f"{prefix}REDIS_PASSWORD") or None,
        )

    def to_url(self) -> str:
        """Render the settings as a URL. The password is included."""
        auth = ""
        if self.username or self.password:
            auth = quote(self.username or "", safe="")
            if self.password:
                auth += ":" + quote(self.password, safe="")
            auth += "@"
        scheme = "rediss" if self.ssl else "redis"
        return f"{scheme}://{auth}{self.host}:{self.port}/{self.db}"
