#!/usr/bin/env python3
"""
The Cartographer
Extracts hardware-ID lines from driver-description (.inf) files into a flat
line-oriented cache.

Each cache line is "<inf line>|::|<source path>". The cache is written in
file-processing order with no deduplication, and is only ever rebuilt
whole.
"""

import re
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List

from driverforge.errors import CacheFormatError

CACHE_SEPARATOR = "|::|"

# BUS\VEN_xxxx&DEV_xxxx
HWID_LINE_PATTERN = re.compile(r'[A-Z]{3}\\[A-Z]{3}_[0-9A-F]{4}&[A-Z]{3}_[0-9A-F]{4}')

UTF16_BOMS = (b'\xff\xfe', b'\xfe\xff')


@dataclass
class CacheEntry:
    line: str
    source: str


@dataclass
class IndexSummary:
    files_scanned: int
    files_skipped: int
    entries_written: int


def find_description_files(root: Path) -> List[Path]:
    """All .inf files under root, sorted."""
    return sorted(p for p in root.rglob("*") if p.suffix.lower() == ".inf" and p.is_file())


def read_description_file(path: Path) -> str:
    raw = path.read_bytes()
    if raw[:2] in UTF16_BOMS:
        return raw.decode('utf-16', errors='ignore')
    return raw.decode('utf-8', errors='ignore')


def extract_entries(path: Path) -> List[CacheEntry]:
    """Hardware-ID lines of one description file."""
    entries = []
    source = str(path)

    for line in read_description_file(path).splitlines():
        if not HWID_LINE_PATTERN.search(line):
            continue
        text = line.strip()
        # Would make the cache line ambiguous
        if CACHE_SEPARATOR in text:
            continue
        entries.append(CacheEntry(line=text, source=source))

    return entries


def sync_description_files(remote_root: Path, local_root: Path, verbose: bool = True) -> int:
    """Mirror every .inf under remote_root into local_root, keeping relative paths.

    local_root is emptied first so packages removed from the share do not
    survive. Returns the number of files copied. Files that cannot be copied
    are skipped.
    """
    shutil.rmtree(local_root, ignore_errors=True)
    copied = 0
    for src in find_description_files(remote_root):
        dest = local_root / src.relative_to(remote_root)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
        except OSError:
            continue
        copied += 1

    if verbose:
        print(f"[cartographer] Copied {copied} description files to {local_root}", file=sys.stderr)
    return copied


def build_index(root: Path, cache_path: Path, verbose: bool = True) -> IndexSummary:
    """Scan root and write the cache, replacing any previous one."""
    if verbose:
        print(f"[cartographer] Scanning description files: {root}", file=sys.stderr)

    scanned = 0
    skipped = 0
    written = 0

    cache_path.parent.mkdir(parents=True, exist_ok=True)
    with open(cache_path, 'w', encoding='utf-8', newline='\n') as f:
        for inf_file in find_description_files(root):
            try:
                entries = extract_entries(inf_file)
            except OSError:
                skipped += 1
                continue

            scanned += 1
            for entry in entries:
                f.write(f"{entry.line}{CACHE_SEPARATOR}{entry.source}\n")
            written += len(entries)

    summary = IndexSummary(files_scanned=scanned, files_skipped=skipped, entries_written=written)

    if verbose:
        print(f"[cartographer] Indexed {scanned} files ({skipped} skipped)", file=sys.stderr)
        print(f"[cartographer]   Cache entries: {written}", file=sys.stderr)
        print(f"[cartographer] Cache saved: {cache_path}", file=sys.stderr)

    return summary


def load_index(cache_path: Path) -> List[CacheEntry]:
    """Read cache entries back in persisted order."""
    entries = []
    with open(cache_path, encoding='utf-8') as f:
        for lineno, raw in enumerate(f, start=1):
            raw = raw.rstrip('\n')
            if not raw:
                continue
            line, sep, source = raw.rpartition(CACHE_SEPARATOR)
            if not sep:
                raise CacheFormatError(f"{cache_path}:{lineno}: missing separator")
            entries.append(CacheEntry(line=line, source=source))
    return entries


def main():
    if len(sys.argv) < 3:
        print("Usage: extract_drivers.py <inf_root> <cache_file>", file=sys.stderr)
        sys.exit(1)

    root = Path(sys.argv[1])

    if not root.exists():
        print(f"Error: {root} not found", file=sys.stderr)
        sys.exit(1)

    build_index(root, Path(sys.argv[2]))


if __name__ == "__main__":
    main()
