"""Config settings – Settings base class and the capture settings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from cellex_inbox.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class CaptureSettings(Settings):
    """Storage keys and timings for the cart capture pipeline.

    The key defaults match what the storefront pages write, so an admin
    process pointed at the same storage sees the same collections.
    """

    _prefix: ClassVar[str] = "CELLEX"

    inbox_key: str = "admin.inbox"
    confirmed_key: str = "confirmedOrders"
    rejected_key: str = "rejectedOrders"
    cart_key: str = "cart"
    current_user_key: str = "app.currentUserId"
    users_key: str = "app.users"
    seen_key_prefix: str = "admin.cartSeen"
    auto_capture_key: str = "admin.autoCapture"
    cart_key_patterns: list[str] = dataclasses.field(
        default_factory=lambda: ["cart.{owner}", "cart.u_{owner}", "user.cart.{owner}"]
    )
    capture_delay_ms: int = 120
    scan_interval_seconds: float = 0.0
    default_auto_capture: bool = True

    def _validate(self) -> None:
        for name in (
            "inbox_key",
            "confirmed_key",
            "rejected_key",
            "cart_key",
            "current_user_key",
            "users_key",
            "seen_key_prefix",
            "auto_capture_key",
        ):
            if not getattr(self, name):
                raise InvalidSettingValueError(name, getattr(self, name), "must not be empty")
        if len({self.inbox_key, self.confirmed_key, self.rejected_key}) != 3:
            raise InvalidSettingValueError(
                "inbox_key", self.inbox_key, "inbox and archive keys must be distinct"
            )
        for pattern in self.cart_key_patterns:
            if "{owner}" not in pattern:
                raise InvalidSettingValueError("cart_key_patterns", pattern, "missing '{owner}' placeholder")
        if self.capture_delay_ms < 0:
            raise InvalidSettingValueError("capture_delay_ms", self.capture_delay_ms, "must be >= 0")
        if self.scan_interval_seconds < 0:
            raise InvalidSettingValueError("scan_interval_seconds", self.scan_interval_seconds, "must be >= 0")

    @property
    def capture_delay(self) -> float:
        return self.capture_delay_ms / 1000

    def seen_key(self, owner_id: str, source: str) -> str:
        return f"{self.seen_key_prefix}.{owner_id}.{source}"

    def owner_cart_keys(self, owner_id: str) -> list[str]:
        return [p.format(owner=owner_id) for p in self.cart_key_patterns]


__all__ = ["CaptureSettings", "Settings"]
