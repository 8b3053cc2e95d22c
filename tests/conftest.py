import pytest


def _write_inf(path, lines, encoding="utf-8"):
    path.parent.mkdir(parents=True, exist_ok=True)
    data = "\r\n".join(lines) + "\r\n"
    if encoding == "utf-16":
        path.write_bytes(data.encode("utf-16"))
    else:
        path.write_text(data, encoding=encoding)
    return path


@pytest.fixture
def write_inf():
    return _write_inf


@pytest.fixture
def driver_tree(tmp_path):
    """Small driver-package tree with three description files."""
    root = tmp_path / "drivers"
    _write_inf(root / "lan" / "e1d.inf", [
        "[Version]",
        "Signature   = \"$WINDOWS NT$\"",
        "%E15BCNC.DeviceDesc% = E15BC, PCI\\VEN_8086&DEV_15BC",
        "%E15BCNC.DeviceDesc% = E15BC, PCI\\VEN_8086&DEV_15BC&SUBSYS_86721043",
    ])
    _write_inf(root / "audio" / "hdx.inf", [
        "[Manufacturer]",
        "%Realtek% = Realtek, NTamd64",
        "%HDAudio.DeviceDesc% = RTHDA, HDAUDIO\\FUNC_01&VEN_10EC&DEV_0887",
        "%Codec% = RTHDA, HDA\\VEN_10EC&DEV_0887",
    ])
    _write_inf(root / "chipset" / "heci.inf", [
        "%HECI.DeviceDesc% = HECI_INST, PCI\\VEN_8086&DEV_A2BA",
    ], encoding="utf-16")
    (root / "readme.txt").write_text("PCI\\VEN_8086&DEV_FFFF\n")
    return root
