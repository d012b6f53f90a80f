from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.constants import DEFAULT_ALGORITHM, DEFAULT_TOKEN_TYPE
from .durations import DurationLike, parse_duration


@dataclass(slots=True)
class JWSAuthSettings:
    """
    Token signing + lifetime settings.

    Host code decides how to construct this (env, config file, etc.).
    Durations may be given as strings like "1 hour" and are normalized to
    timedelta on construction; an empty `refresh_window` disables refresh
    and an empty `validity` issues tokens without an `exp` claim.
    """
    public_key_path: Optional[str] = None
    private_key_path: Optional[str] = None
    private_key_passphrase: Optional[str] = None
    algorithm: str = DEFAULT_ALGORITHM
    validity: DurationLike = "1 hour"
    refresh_window: DurationLike = "24 hours"
    token_type: str = DEFAULT_TOKEN_TYPE

    def __post_init__(self) -> None:
        self.validity = parse_duration(self.validity)
        self.refresh_window = parse_duration(self.refresh_window)

