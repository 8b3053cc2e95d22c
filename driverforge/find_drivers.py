#!/usr/bin/env python3
"""
Driver finder
Looks up which driver packages claim a set of devices.

Builds (or reuses) the hardware-ID cache, then matches the operator's
device list against it.

Usage:
    driverforge-find devices.txt                      # Use existing cache
    driverforge-find devices.txt --refresh            # Re-copy and rebuild cache
    driverforge-find - --no-sync --driver-root D:\\drv < devices.txt
"""

import argparse
import sys
from pathlib import Path

from driverforge.cartographer.extract_drivers import build_index, sync_description_files
from driverforge.config import FinderConfig
from driverforge.errors import CacheFormatError, DriverForgeError, DriverRootError
from driverforge.foundry.match_drivers import find_matches, format_json, format_report
from driverforge.scout.scout import load_devices


def read_device_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(errors='ignore')


def prepare_cache(config: FinderConfig, verbose: bool = True) -> Path:
    """Rebuild the cache if asked to, if none exists, or if it was built
    from a different root. Returns its path."""
    cache_path = config.cache_path
    if not config.needs_rebuild():
        if verbose:
            print(f"[finder] Using cache: {cache_path}", file=sys.stderr)
        return cache_path

    if verbose and cache_path.exists() and not config.refresh:
        print(f"[finder] Cache was built from {config.cached_index_root()}, "
              f"rebuilding for {config.index_root}", file=sys.stderr)

    driver_root = Path(config.driver_root)
    if not driver_root.exists():
        raise DriverRootError(f"driver root {driver_root} not found")

    if config.sync:
        sync_description_files(driver_root, config.index_root, verbose=verbose)

    build_index(config.index_root, cache_path, verbose=verbose)
    config.record_index_root()
    return cache_path


def run(config: FinderConfig, device_text: str, as_json: bool = False,
        pretty: bool = False, verbose: bool = True) -> str:
    # Parse first; bad input must fail before any I/O
    devices = load_devices(device_text)

    cache_path = prepare_cache(config, verbose=verbose)
    try:
        records = find_matches(cache_path, devices, verbose=verbose)
    except CacheFormatError as e:
        raise CacheFormatError(f"{e} (rerun with --refresh)") from e

    if as_json:
        return format_json(records, config.index_root, pretty=pretty)
    return "\n".join(format_report(records, config.index_root))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Find driver-description files matching a list of devices"
    )
    parser.add_argument(
        "devices",
        help="Device list file ('<name> <instance path>' per line), or - for stdin"
    )
    parser.add_argument(
        "--driver-root",
        help="Driver-package root (default: $DRIVERFORGE_DRIVER_ROOT)"
    )
    parser.add_argument(
        "--cache-dir",
        help="Local cache directory (default: $DRIVERFORGE_CACHE_DIR)"
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Rebuild the cache even if one exists"
    )
    parser.add_argument(
        "--no-sync",
        action="store_true",
        help="Index the driver root in place instead of copying it locally"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit matches as JSON"
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON output"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output on stderr"
    )

    args = parser.parse_args(argv)

    config = FinderConfig(refresh=args.refresh, sync=not args.no_sync)
    if args.driver_root:
        config.driver_root = args.driver_root
    if args.cache_dir:
        config.cache_dir = args.cache_dir

    try:
        device_text = read_device_text(args.devices)
        output = run(config, device_text, as_json=args.json, pretty=args.pretty,
                     verbose=not args.quiet)
    except (OSError, DriverForgeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(output)


if __name__ == "__main__":
    main()
