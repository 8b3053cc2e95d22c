import pytest

from driverforge.errors import DeviceListError
from driverforge.scout.scout import load_devices, normalize_hardware_id, parse_device_list


@pytest.mark.parametrize("instance_path, expected", [
    ("PCI\\VEN_8086&DEV_A2A1&SUBSYS_86941043&REV_00\\3&11583659&0&FC",
     "PCI\\VEN_8086&DEV_A2A1&SUBSYS_86941043"),
    ("PCI\\VEN_8086&DEV_15BC&REV_10\\3&11583659&0&FE", "PCI\\VEN_8086&DEV_15BC"),
    ("USB\\VID_046D&PID_C52B\\5&2D4E1F9&0&1", "USB\\VID_046D&PID_C52B"),
    ("ACPI\\PNP0C14", "ACPI\\PNP0C14"),
    ("pci\\ven_8086&dev_a2a1&rev_00", "pci\\ven_8086&dev_a2a1"),
])
def test_normalize_hardware_id(instance_path, expected):
    assert normalize_hardware_id(instance_path) == expected


def test_normalized_pattern_drops_revision_and_tail():
    pattern = normalize_hardware_id("PCI\\VEN_10DE&DEV_1C82&SUBSYS_11BF1462&REV_A1\\4&2E6F6E0B&0&0008")
    assert "REV_" not in pattern
    assert pattern.count("\\") == 1
    assert "0008" not in pattern


def test_parse_device_list():
    text = """
    # copied from the inventory
    Intel(R) Ethernet Connection I219-V    PCI\\VEN_8086&DEV_15BC&REV_10\\3&11583659&0&FE
    Realtek Audio\tHDAUDIO\\FUNC_01&VEN_10EC&DEV_0887&SUBSYS_10438445&REV_1003\\4&1&0&0001
    """
    queries = parse_device_list(text)

    assert [q.name for q in queries] == ["Intel(R) Ethernet Connection I219-V", "Realtek Audio"]
    assert queries[0].pattern == "PCI\\VEN_8086&DEV_15BC"
    assert queries[1].pattern == "HDAUDIO\\FUNC_01&VEN_10EC&DEV_0887&SUBSYS_10438445"


def test_load_devices_keeps_list_order():
    devices = load_devices("Zeta  PCI\\VEN_1111&DEV_2222\nAlpha  PCI\\VEN_3333&DEV_4444\n")
    assert list(devices) == ["Zeta", "Alpha"]


@pytest.mark.parametrize("text", ["", "   \n\n", "# only a comment\n"])
def test_empty_device_list_is_fatal(text):
    with pytest.raises(DeviceListError):
        parse_device_list(text)


def test_line_without_instance_path_is_fatal():
    with pytest.raises(DeviceListError, match="line 2"):
        parse_device_list("Good  PCI\\VEN_8086&DEV_15BC\nJust a name\n")


def test_uncompilable_hardware_id_is_fatal():
    with pytest.raises(DeviceListError, match="line 2: unusable hardware ID"):
        parse_device_list("NIC  PCI\\VEN_8086&DEV_15BC\nOdd  ROOT\\DEV[1\\0000\n")


def test_duplicate_device_name_is_fatal():
    with pytest.raises(DeviceListError, match="duplicate"):
        parse_device_list("NIC  PCI\\VEN_8086&DEV_15BC\nNIC  PCI\\VEN_8086&DEV_15BD\n")
