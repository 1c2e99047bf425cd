# chirpy/core/context.py
from __future__ import annotations

import threading
from dataclasses import dataclass, field

from chirpy.core.config import Settings


class HitCounter:
    """Process-wide fileserver hit counter. The only mutable shared state."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass(frozen=True)
class ApiContext:
    """
    Startup-time configuration handed to request handlers via app.state.

    jwt_secret / polka_key / platform are read once and never change at runtime.
    """

    jwt_secret: str
    polka_key: str
    platform: str
    hits: HitCounter = field(default_factory=HitCounter)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApiContext":
        return cls(
            jwt_secret=settings.JWT_SECRET,
            polka_key=settings.POLKA_KEY,
            platform=settings.PLATFORM,
        )

    @property
    def is_dev(self) -> bool:
        return self.platform == "dev"
