"""Unit tests for capture settings and their loaders."""

import pytest

from cellex_inbox.config import (
    CaptureSettings,
    ConfigError,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)


class TestCaptureSettingsDefaults:
    def test_storefront_keys(self) -> None:
        s = CaptureSettings()
        assert s.inbox_key == "admin.inbox"
        assert s.confirmed_key == "confirmedOrders"
        assert s.rejected_key == "rejectedOrders"
        assert s.cart_key == "cart"
        assert s.current_user_key == "app.currentUserId"
        assert s.auto_capture_key == "admin.autoCapture"
        assert s.default_auto_capture is True

    def test_capture_delay(self) -> None:
        assert CaptureSettings().capture_delay == pytest.approx(0.12)
        assert CaptureSettings(capture_delay_ms=0).capture_delay == 0

    def test_seen_key_is_per_owner_and_source(self) -> None:
        s = CaptureSettings()
        assert s.seen_key("u_1", "cart") == "admin.cartSeen.u_1.cart"
        assert s.seen_key("u_1", "cart.u_1") == "admin.cartSeen.u_1.cart.u_1"

    def test_owner_cart_keys(self) -> None:
        assert CaptureSettings().owner_cart_keys("7") == ["cart.7", "cart.u_7", "user.cart.7"]


class TestCaptureSettingsValidation:
    def test_empty_key_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            CaptureSettings(cart_key="")
        assert exc_info.value.setting_name == "cart_key"

    def test_archive_keys_must_differ_from_inbox(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            CaptureSettings(rejected_key="admin.inbox")

    def test_pattern_needs_owner_placeholder(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            CaptureSettings(cart_key_patterns=["cart.static"])

    @pytest.mark.parametrize(
        "kwargs",
        [{"capture_delay_ms": -1}, {"scan_interval_seconds": -0.5}],
    )
    def test_negative_timings_rejected(self, kwargs: dict) -> None:
        with pytest.raises(InvalidSettingValueError):
            CaptureSettings(**kwargs)

    def test_validation_error_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            CaptureSettings(capture_delay_ms=-1)


class TestEnvSettingsLoader:
    def test_defaults_without_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CELLEX_INBOX_KEY", raising=False)
        assert EnvSettingsLoader().load(CaptureSettings) == CaptureSettings()

    def test_reads_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CELLEX_INBOX_KEY", "shop.inbox")
        monkeypatch.setenv("CELLEX_CAPTURE_DELAY_MS", "250")
        monkeypatch.setenv("CELLEX_SCAN_INTERVAL_SECONDS", "2.5")
        monkeypatch.setenv("CELLEX_DEFAULT_AUTO_CAPTURE", "false")
        monkeypatch.setenv("CELLEX_CART_KEY_PATTERNS", "basket.{owner}, cart.{owner}")
        s = EnvSettingsLoader().load(CaptureSettings)
        assert s.inbox_key == "shop.inbox"
        assert s.capture_delay_ms == 250
        assert s.scan_interval_seconds == 2.5
        assert s.default_auto_capture is False
        assert s.cart_key_patterns == ["basket.{owner}", "cart.{owner}"]

    def test_unparseable_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CELLEX_CAPTURE_DELAY_MS", "soon")
        with pytest.raises(ConfigError):
            EnvSettingsLoader().load(CaptureSettings)

    def test_invalid_value_surfaces_validation_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CELLEX_CAPTURE_DELAY_MS", "-5")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(CaptureSettings)

    def test_missing_required_field(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from dataclasses import dataclass
        from typing import ClassVar

        from cellex_inbox.config import Settings

        @dataclass
        class _Required(Settings):
            _prefix: ClassVar[str] = "SHOP"
            storage_url: str

        monkeypatch.delenv("SHOP_STORAGE_URL", raising=False)
        with pytest.raises(MissingRequiredSettingError):
            EnvSettingsLoader().load(_Required)


class TestDotenvSettingsLoader:
    def test_override_replaces_environment(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CELLEX_CART_KEY", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("CELLEX_CART_KEY=basket\n")
        s = DotenvSettingsLoader(str(env_file), override=True).load(CaptureSettings)
        assert s.cart_key == "basket"

    def test_environment_wins_without_override(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CELLEX_CART_KEY", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("CELLEX_CART_KEY=from-file\n")
        s = DotenvSettingsLoader(str(env_file)).load(CaptureSettings)
        assert s.cart_key == "from-env"
