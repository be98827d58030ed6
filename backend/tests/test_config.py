"""Tests for the settings layer."""

from robovac_discovery.core.config import Settings


class TestSettings:

    def test_defaults(self):
        s = Settings()

        assert s.CANDIDATE_PORTS == [6668, 6667, 443]
        assert s.CONTROL_PORT == 6668
        assert s.HOST_COUNT == 254
        assert s.FALLBACK_BASE_NETWORK == "192.168.1.0"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CONTROL_PORT", "6667")
        monkeypatch.setenv("SCAN_BATCH_SIZE", "5")

        s = Settings()

        assert s.CONTROL_PORT == 6667
        assert s.SCAN_BATCH_SIZE == 5

    def test_only_discovery_settings_exposed(self):
        assert set(Settings.model_fields) == {
            "DEBUG",
            "LOG_LEVEL",
            "DEFAULT_SUBNET",
            "FALLBACK_BASE_NETWORK",
            "HOST_COUNT",
            "CANDIDATE_PORTS",
            "CONTROL_PORT",
            "SCAN_BATCH_SIZE",
            "PING_TIMEOUT",
            "PING_PROCESS_TIMEOUT",
            "PORT_TIMEOUT",
            "ARP_TIMEOUT",
            "ARP_SOURCE",
        }
