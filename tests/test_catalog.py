import json

import pytest

from jailbreak_compat import catalog, models


@pytest.fixture
def devices():
    return catalog.default_catalog()


def _record(**overrides):
    data = {
        "name": "Test Phone",
        "family": "iPhone",
        "identifiers": ["Test1,1"],
        "chip": "A15",
        "release_year": 2021,
        "storage_options": [128, 256],
    }
    data.update(overrides)
    return data


def test_normalize_model_input():
    assert catalog.normalize_model_input("Apple iPhone SE (3rd Gen)") == "iPhone SE (3 generation)"
    assert catalog.normalize_model_input("iPad (6 Gen)") == "iPad (6 generation)"
    assert catalog.normalize_model_input("  apple  iPhone 8 ") == "iPhone 8"


def test_normalize_device_name():
    assert catalog.normalize_device_name("  Apple iPhone   SE (2nd generation) ") == "iphone se (2 generation)"
    assert catalog.normalize_device_name("IPHONE XS MAX") == "iphone xs max"


def test_find_exact_and_case_insensitive(devices):
    assert devices.find("iPhone 14 Pro").name == "iPhone 14 Pro"
    assert devices.find("iphone xs max").name == "iPhone XS Max"
    assert devices.find("iPhone 6s").name == "iPhone 6s"
    assert devices.find("iPhone 4S").name == "iPhone 4s"


def test_find_generation_spellings(devices):
    assert devices.find("Apple iPhone SE (3rd Gen)").name == "iPhone SE (3rd generation)"
    assert devices.find("iPad mini (6th gen)").chip == "A15"


def test_prefix_match_respects_word_boundary(devices):
    assert devices.find("iPhone 4").name == "iPhone 4 (GSM)"
    assert devices.find("iPhone 1") is None


def test_prefix_match_for_variant_records(devices):
    record = devices.find("iPod touch (2nd Gen)")
    assert record.name == "iPod touch (2nd generation) MB model"
    assert record.has_bootrom_exploit is True


def test_find_misses(devices):
    assert devices.find("Nonexistent Phone X9000") is None
    assert devices.find("") is None
    assert devices.find("   ") is None


def test_require_raises_unknown_device(devices):
    with pytest.raises(catalog.UnknownDeviceError) as excinfo:
        devices.require("Galaxy S23")
    assert excinfo.value.exit_code == 3
    assert excinfo.value.payload == {"model": "Galaxy S23"}


def test_accessors(devices):
    assert devices.chip_for("iPhone X") == "A11"
    assert devices.chip_for("Galaxy S23") is None
    assert devices.has_bootrom_exploit("iPhone X") is True
    assert devices.has_bootrom_exploit("Galaxy S23") is False
    assert devices.storage_options("iPhone 12") == (64, 128, 256)
    assert devices.storage_options("Galaxy S23") == ()


def test_identifier_and_model_number_lookup(devices):
    assert devices.find_by_identifier("iPhone10,3").name == "iPhone X"
    assert devices.find_by_identifier("iPod2,1").name == "iPod touch (2nd generation) MB model"
    assert devices.find_by_identifier("iPhone99,9") is None
    assert devices.find_by_model_number("a1865").name == "iPhone X"
    assert devices.find_by_model_number("A0000") is None


def test_names_and_search(devices):
    names = devices.names()
    assert len(names) == len(devices)
    assert "iPad 2" in names
    assert [d.name for d in devices.search("apple ipad air 2")] == ["iPad Air 2"]
    minis = devices.search("MINI")
    assert "iPhone 13 mini" in [d.name for d in minis]
    assert all("mini" in d.name.lower() for d in minis)


def test_sorted_for_listing(devices):
    iphones = devices.sorted_for_listing(family="iPhone")
    assert [d.name for d in iphones[:5]] == [
        "iPhone 17 Pro Max",
        "iPhone 17 Pro",
        "iPhone 17 Plus",
        "iPhone 17",
        "iPhone 16 Pro Max",
    ]
    assert all(d.family == "iPhone" for d in iphones)

    ipods = devices.sorted_for_listing(family="ipod touch")
    assert len(ipods) == 8
    assert ipods[0].name == "iPod touch (7th generation)"

    assert devices.sorted_for_listing(family="iPad")[0].name == "iPad Pro 13-inch (M4)"
    assert len(devices.sorted_for_listing()) == len(devices)


def test_default_catalog_is_shared():
    assert catalog.default_catalog() is catalog.default_catalog()


def test_custom_catalog_lookup():
    custom = catalog.DeviceCatalog([models.DeviceRecord(**_record())])
    assert len(custom) == 1
    assert custom.find("test phone").chip == "A15"
    assert custom.find("iPhone 8") is None


def test_from_json(tmp_path):
    path = tmp_path / "devices.json"
    path.write_text(json.dumps([_record(), _record(name="Test Tablet", family="iPad", chip="M1")]), encoding="utf-8")
    loaded = catalog.DeviceCatalog.from_json(path)
    assert loaded.names() == ["Test Phone", "Test Tablet"]
    assert loaded.find("Test Phone").storage_options == (128, 256)


def test_from_json_rejects_unknown_chip(tmp_path):
    path = tmp_path / "devices.json"
    path.write_text(json.dumps([_record(chip="A99")]), encoding="utf-8")
    with pytest.raises(catalog.CatalogError) as excinfo:
        catalog.DeviceCatalog.from_json(path)
    assert excinfo.value.exit_code == 2
    assert excinfo.value.payload["path"] == str(path)
    assert any(err.startswith("0.chip") for err in excinfo.value.payload["errors"])


def test_from_json_missing_file(tmp_path):
    with pytest.raises(catalog.CatalogError) as excinfo:
        catalog.DeviceCatalog.from_json(tmp_path / "missing.json")
    assert excinfo.value.exit_code == 2


def test_normalize_bare_generation_suffix():
    assert catalog.normalize_model_input("iPad 6gen") == "iPad 6 generation"
    assert catalog.normalize_model_input("iPod touch 7th Gen") == "iPod touch 7 generation"
    assert catalog.normalize_device_name("iPad (6th generation)") == "ipad (6 generation)"
    assert catalog.normalize_device_name("iPad (6 generation)") == "ipad (6 generation)"
