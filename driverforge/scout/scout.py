#!/usr/bin/env python3
"""
The Scout
Turns an operator-supplied device list into hardware-ID patterns.

The list is usually copy-pasted from a system inventory, one device per
line:

    Intel(R) Ethernet Connection I219-V    PCI\\VEN_8086&DEV_15BC&SUBSYS_86721043&REV_10\\3&11583659&0&FE

Usage:
    ./scout.py devices.txt
"""

import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from driverforge.errors import DeviceListError
from driverforge.foundry.match_drivers import compile_pattern

# "<name><whitespace><instance path>", the path being the last token and
# containing at least one backslash
DEVICE_LINE = re.compile(r'^(?P<name>.*?\S)\s+(?P<path>\S*\\\S*)$')

REVISION_SUFFIX = re.compile(r'&REV_.*$', re.IGNORECASE)


@dataclass
class DeviceQuery:
    """One device the operator wants drivers for"""
    name: str
    instance_path: str
    pattern: str


def normalize_hardware_id(instance_path: str) -> str:
    """Reduce a device-instance path to the hardware ID used for matching.

    Keeps the bus and ID segments (everything before the second backslash)
    and drops the revision suffix along with anything after it.
    """
    segments = instance_path.strip().split('\\')
    hardware_id = '\\'.join(segments[:2])
    return REVISION_SUFFIX.sub('', hardware_id)


def parse_device_list(text: str) -> List[DeviceQuery]:
    """Parse device list text. Raises DeviceListError on bad input."""
    queries = []
    seen = set()

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue

        match = DEVICE_LINE.match(line)
        if not match:
            raise DeviceListError(
                f"line {lineno}: expected '<device name> <instance path>', got {line!r}"
            )

        name = match.group('name')
        if name in seen:
            raise DeviceListError(f"line {lineno}: duplicate device name {name!r}")
        seen.add(name)

        instance_path = match.group('path')
        pattern = normalize_hardware_id(instance_path)
        if not pattern:
            raise DeviceListError(f"line {lineno}: empty hardware ID in {instance_path!r}")
        try:
            compile_pattern(pattern)
        except re.error as e:
            raise DeviceListError(f"line {lineno}: unusable hardware ID {pattern!r}: {e}") from e

        queries.append(DeviceQuery(name=name, instance_path=instance_path, pattern=pattern))

    if not queries:
        raise DeviceListError("no devices found in device list")

    return queries


def load_devices(text: str) -> Dict[str, str]:
    """Device name -> hardware-ID pattern, in list order."""
    return {q.name: q.pattern for q in parse_device_list(text)}


def main():
    if len(sys.argv) < 2:
        print("Usage: scout.py <devices.txt>", file=sys.stderr)
        sys.exit(1)

    device_file = Path(sys.argv[1])

    if not device_file.exists():
        print(f"Error: {device_file} not found", file=sys.stderr)
        sys.exit(1)

    try:
        queries = parse_device_list(device_file.read_text(errors='ignore'))
    except DeviceListError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for q in queries:
        print(f"{q.name}: {q.pattern}")


if __name__ == "__main__":
    main()
