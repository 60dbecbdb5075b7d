import json

from typer.testing import CliRunner

from jailbreak_compat import __version__, catalog, cli, resolver
from jailbreak_compat.models import DeviceRecord
from jailbreak_compat.rules import ChipMatch, RuleTable, Tier, ToolRule
from jailbreak_compat.versions import VersionRange


runner = CliRunner()


def test_version_json():
    result = runner.invoke(cli.app, ["version", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"version": __version__}


def test_check_json_success():
    result = runner.invoke(cli.app, ["check", "iPhone X", "14.8.1", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["status"] == "JAILBREAKABLE"
    assert payload["has_bootrom_exploit"] is True
    assert [tool["name"] for tool in payload["matched_tools"]] == ["Taurine", "checkra1n"]
    assert payload["device"]["chip"] == "A11"


def test_check_json_unknown_device():
    result = runner.invoke(cli.app, ["check", "Nonexistent Phone X9000", "16.0", "--json"])
    assert result.exit_code == 3
    payload = json.loads(result.stdout)
    assert payload["status"] == "UNKNOWN"
    assert payload["matched_tools"] == []
    assert payload["device"] is None


def test_check_text_output():
    result = runner.invoke(cli.app, ["check", "iPhone 8", "16.6"])
    assert result.exit_code == 0
    assert "Device: iPhone 8 (A11)" in result.stdout
    assert "Status: Jailbreakable (JAILBREAKABLE)" in result.stdout
    assert "palera1n" in result.stdout
    assert "Dopamine" in result.stdout
    assert "Note: This device has a permanent bootrom exploit (checkm8)" in result.stdout


def test_check_text_without_tools():
    result = runner.invoke(cli.app, ["check", "iPhone 17 Pro", "26.0"])
    assert result.exit_code == 0
    assert "Status: Stock (NOT_JAILBROKEN)" in result.stdout
    assert "No jailbreak tools for iOS 26.0." in result.stdout


def test_check_by_identifier():
    result = runner.invoke(cli.app, ["check", "iPhone12,8", "16.6", "--identifier", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["device"]["name"] == "iPhone SE (2nd generation)"
    assert [tool["name"] for tool in payload["matched_tools"]] == ["Dopamine", "NathanLR"]


def test_check_uses_default_resolver(monkeypatch):
    record = DeviceRecord(name="Lab Phone", family="iPhone", chip="A15", release_year=2021)
    fake = resolver.CompatibilityResolver(catalog=catalog.DeviceCatalog([record]))
    monkeypatch.setattr(resolver, "default_resolver", lambda: fake)
    result = runner.invoke(cli.app, ["check", "Lab Phone", "16.6", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["device"]["name"] == "Lab Phone"


def test_device_json_success():
    result = runner.invoke(cli.app, ["device", "iPhone X", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["chip"] == "A11"
    assert payload["identifiers"] == ["iPhone10,3", "iPhone10,6"]


def test_device_text_output():
    result = runner.invoke(cli.app, ["device", "iPhone 16 Pro"])
    assert result.exit_code == 0
    assert "chip: A18" in result.stdout
    assert "storage_options: 128GB, 256GB, 512GB, 1TB" in result.stdout


def test_device_json_unknown():
    result = runner.invoke(cli.app, ["device", "Galaxy S23", "--json"])
    assert result.exit_code == 3
    payload = json.loads(result.stdout)
    assert payload["error"]
    assert payload["model"] == "Galaxy S23"


def test_devices_family_json():
    result = runner.invoke(cli.app, ["devices", "--family", "iPod touch", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert len(payload) == 8
    assert payload[0]["name"] == "iPod touch (7th generation)"


def test_devices_search_json():
    result = runner.invoke(cli.app, ["devices", "--search", "mini", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload
    assert all("mini" in item["name"].lower() for item in payload)


def test_devices_no_match():
    result = runner.invoke(cli.app, ["devices", "--search", "galaxy"])
    assert result.exit_code == 0
    assert "No devices found." in result.stdout


def test_tools_json():
    result = runner.invoke(cli.app, ["tools", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload[0]["name"] == "palera1n"
    serotonin = next(item for item in payload if item["name"] == "Serotonin")
    assert serotonin["fallback_for"] == "Dopamine"
    assert serotonin["tiers"][0]["versions"] == ["16.0 - 16.6.1"]


def test_custom_catalog_file(tmp_path):
    path = tmp_path / "devices.json"
    path.write_text(
        json.dumps([{"name": "Lab Phone", "family": "iPhone", "chip": "A11", "release_year": 2017}]),
        encoding="utf-8",
    )
    result = runner.invoke(cli.app, ["--catalog", str(path), "check", "Lab Phone", "15.0", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [tool["name"] for tool in payload["matched_tools"]] == ["palera1n", "Dopamine", "meowbrek2"]


def test_invalid_catalog_file(tmp_path):
    path = tmp_path / "devices.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(cli.app, ["--catalog", str(path), "devices", "--json"])
    assert result.exit_code == 2


def test_tools_lists_active_rules(monkeypatch):
    table = RuleTable(
        [ToolRule(name="LabTool", type="tethered", tiers=(Tier(ChipMatch.only("A11"), (VersionRange.exact("11.0"),)),))]
    )
    fake = resolver.CompatibilityResolver(rules=table)
    monkeypatch.setattr(resolver, "default_resolver", lambda: fake)
    result = runner.invoke(cli.app, ["tools", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [item["name"] for item in payload] == ["LabTool"]
    assert payload[0]["tiers"][0] == {"chips": "A11", "versions": ["11.0"], "notes": None}
