"""Command-line argument parsing."""

import argparse
from pathlib import Path
from typing import List, Optional

from .profiles import BUILTIN_PROFILES


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hostprep",
        description=(
            "Prepare a fresh VM for a Kubernetes install: put /data (and optionally /backup) "
            "on LVM+XFS data disks, move runtime state onto /data, then hand off to the installer."
        ),
        epilog="Must be run as root. Set HOSTPREP_DEBUG=1 to log every command.",
    )
    parser.add_argument(
        "--profile",
        choices=["auto"] + sorted(BUILTIN_PROFILES),
        default="auto",
        help="environment profile (default: auto-detect azure vs generic)",
    )
    parser.add_argument(
        "--profile-file",
        type=Path,
        default=None,
        help="JSON profile to use instead of a built-in one",
    )
    parser.add_argument(
        "--host-root",
        type=Path,
        default=Path("/"),
        help="root under which files are read and written (default: /)",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=None,
        help="write provision-report.json and provision-summary.md here",
    )
    parser.add_argument(
        "--installer-url",
        default=None,
        help="override the installer URL from the profile",
    )
    parser.add_argument(
        "--no-install",
        action="store_true",
        help="stop after provisioning; do not fetch or run the installer",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="do not ask before running the installer",
    )
    return parser.parse_args(argv)
