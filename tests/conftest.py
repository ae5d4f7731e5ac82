"""Pytest configuration and fixtures for Tweaksmith tests."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from tweaksmith.config.models import EditorSettings, Tweak


TELEMETRY_CODE = (
    'Set-ItemProperty -Path "HKLM:\\SOFTWARE\\Policies\\Microsoft\\Windows\\DataCollection" '
    '-Name "AllowTelemetry" -Value 0   \r\n'
    'Stop-Service -Name "DiagTrack" -Force\r\n'
)

DNS_CODE = (
    "\n\n"
    '$adapter = Get-NetAdapter | Where-Object { $_.Status -eq "Up" }\n'
    "\n\n\n\n"
    'Set-DnsClientServerAddress -InterfaceIndex $adapter.ifIndex -ServerAddresses ("1.1.1.1", "1.0.0.1")\t\n'
    "Clear-DnsClientCache\n"
)

FIREWALL_CODE = "Set-NetFirewallProfile -Profile Domain,Public,Private -Enabled False"


@pytest.fixture(autouse=True)
def _isolate_settings(tmp_path, monkeypatch):
    """Never read or write the real ~/.tweaksmith/settings.yaml."""
    monkeypatch.delenv("TWEAKSMITH_SETTINGS", raising=False)
    with patch("tweaksmith.config.manager.DEFAULT_SETTINGS_PATH", tmp_path / "default-settings.yaml"):
        yield


@pytest.fixture
def telemetry_tweak():
    return Tweak(
        id="1",
        title="Disable Telemetry",
        description="Turns off Windows telemetry.\nRequires a restart.",
        code=TELEMETRY_CODE,
        download_count=1200,
        report_count=3,
        tweak_comment="Tested on   22H2",
    )


@pytest.fixture
def dns_tweak():
    return Tweak(id="2", title="Optimize DNS", code=DNS_CODE, download_count=40)


@pytest.fixture
def firewall_tweak():
    return Tweak(id="3", title="Disable Windows Firewall!!", code=FIREWALL_CODE)


@pytest.fixture
def selection(telemetry_tweak, dns_tweak):
    """Ordered selection: telemetry first, then DNS."""
    return {telemetry_tweak.id: telemetry_tweak, dns_tweak.id: dns_tweak}


@pytest.fixture
def default_settings():
    return EditorSettings()


@pytest.fixture
def catalog_file(tmp_path, telemetry_tweak, dns_tweak, firewall_tweak):
    """YAML catalog with the three sample tweaks, in id order."""
    path = tmp_path / "catalog.yaml"
    data = {
        "version": 1,
        "tweaks": [
            t.model_dump() for t in (telemetry_tweak, dns_tweak, firewall_tweak)
        ],
    }
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def settings_file(tmp_path) -> Path:
    return tmp_path / "settings.yaml"
