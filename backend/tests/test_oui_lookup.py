"""Unit tests for OUI vendor matching."""

import pytest

from robovac_discovery.scanner.oui_lookup import (
    ANKER_EUFY,
    KNOWN_OUIS,
    lookup_vendor,
    normalize_mac,
)


class TestLookupVendor:

    def test_uppercase_mac_matches(self):
        assert lookup_vendor("34:EA:34:11:22:33") == ANKER_EUFY

    def test_lowercase_mac_matches(self):
        assert lookup_vendor("34:ea:34:aa:bb:cc") == ANKER_EUFY

    def test_dash_delimited_mac_matches(self):
        assert lookup_vendor("70-55-82-01-02-03") == ANKER_EUFY

    @pytest.mark.parametrize("oui", sorted(KNOWN_OUIS))
    def test_every_known_prefix(self, oui):
        assert lookup_vendor(f"{oui}:00:00:01") == ANKER_EUFY

    def test_unknown_vendor(self):
        assert lookup_vendor("b8:27:eb:12:34:56") is None

    def test_prefix_must_be_leading(self):
        # OUI bytes appearing later in the address do not count
        assert lookup_vendor("00:11:34:ea:34:aa") is None

    def test_missing_mac(self):
        assert lookup_vendor(None) is None
        assert lookup_vendor("") is None


def test_normalize_mac():
    assert normalize_mac(" AA-BB-CC-DD-EE-FF ") == "aa:bb:cc:dd:ee:ff"
