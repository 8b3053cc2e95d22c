#!/usr/bin/env python3
"""
Device → driver-description matcher.

Scans the cartographer's cache once and credits each cache line to at most
one device. Two shortcuts keep the scan cheap:

- once a file has produced a match, its remaining lines are skipped, so only
  the first device matched in a file is ever credited for it;
- a device stops being tested after MAX_MATCHES_PER_DEVICE matches.

Both are deliberate and results depend on cache order. Patterns are used as
regex fragments with only backslashes escaped, so any other regex
metacharacter in a hardware ID passes through as-is.
"""

import json
import re
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from driverforge.cartographer.extract_drivers import CacheEntry, load_index

MAX_MATCHES_PER_DEVICE = 3
RESULT_SEPARATOR = " >>> "
NO_MATCHES = "No matches found."


@dataclass
class MatchRecord:
    device: str
    path: str

    def sort_key(self) -> str:
        return f"{self.device}{RESULT_SEPARATOR}{self.path}"


@dataclass
class ScanState:
    """Mutable state threaded through one matching run."""
    last_matched_source: Optional[str] = None
    match_counts: Dict[str, int] = field(default_factory=dict)

    def saturated(self, device: str) -> bool:
        return self.match_counts.get(device, 0) >= MAX_MATCHES_PER_DEVICE

    def record(self, device: str, source: str):
        self.last_matched_source = source
        self.match_counts[device] = self.match_counts.get(device, 0) + 1


def compile_pattern(pattern: str) -> "re.Pattern[str]":
    return re.compile(pattern.replace('\\', '\\\\'), re.IGNORECASE)


def match_devices(entries: Iterable[CacheEntry], devices: Dict[str, str]) -> List[MatchRecord]:
    """Match cache entries against device name -> hardware-ID pattern."""
    compiled = {name: compile_pattern(pattern) for name, pattern in devices.items()}
    state = ScanState()
    records = []

    for entry in entries:
        if entry.source == state.last_matched_source:
            continue

        for name, regex in compiled.items():
            if state.saturated(name):
                continue
            if regex.search(entry.line):
                records.append(MatchRecord(device=name, path=entry.source))
                state.record(name, entry.source)
                break

    return records


def sort_matches(records: Iterable[MatchRecord]) -> List[MatchRecord]:
    return sorted(records, key=MatchRecord.sort_key)


def shorten_path(path: str, root: Optional[Path]) -> str:
    """Path relative to root when it lies under it."""
    if root is None:
        return path
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return path


def format_report(records: Iterable[MatchRecord], root: Optional[Path] = None) -> List[str]:
    ordered = sort_matches(records)
    if not ordered:
        return [NO_MATCHES]
    return [f"{r.device}{RESULT_SEPARATOR}{shorten_path(r.path, root)}" for r in ordered]


def format_json(records: Iterable[MatchRecord], root: Optional[Path] = None, pretty: bool = False) -> str:
    ordered = [
        asdict(MatchRecord(device=r.device, path=shorten_path(r.path, root)))
        for r in sort_matches(records)
    ]
    return json.dumps(ordered, indent=2 if pretty else None)


def find_matches(cache_path: Path, devices: Dict[str, str], verbose: bool = True) -> List[MatchRecord]:
    """Load the cache and match it against devices."""
    entries = load_index(cache_path)
    if verbose:
        print(f"[foundry] Matching {len(devices)} devices against {len(entries)} cache entries...",
              file=sys.stderr)

    records = match_devices(entries, devices)

    if verbose:
        print(f"[foundry]   Found {len(records)} matches", file=sys.stderr)
    return records
