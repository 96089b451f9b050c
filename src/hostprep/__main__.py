"""Entry point: python -m hostprep / hostprep."""

import argparse
import os
import sys
from typing import List, Optional

from . import log
from .cli import parse_args
from .errors import ProvisionError
from .host import Host
from .installer import confirm, handoff
from .pipeline import REPORT_FILENAME, save_report
from .profiles import detect_profile, load_profile
from .schema import Profile, ProvisionReport


def _select_profile(host: Host, args: argparse.Namespace) -> Profile:
    if args.profile_file is not None:
        profile = load_profile(path=args.profile_file)
    else:
        name = detect_profile(host) if args.profile == "auto" else args.profile
        profile = load_profile(name)
    if args.installer_url:
        profile.installer_url = args.installer_url
    return profile


def _run_provisioners(host: Host, profile: Profile) -> ProvisionReport:
    from .provisioners import run_all
    return run_all(host, profile)


def _write_report(report: ProvisionReport, args: argparse.Namespace) -> None:
    from .renderers import run_all as run_all_renderers
    save_report(report, args.report_dir / REPORT_FILENAME)
    run_all_renderers(report, args.report_dir)
    log.success(f"Report written to {args.report_dir}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if os.geteuid() != 0:
        log.fail('hostprep must run as root (try "sudo hostprep")')
        return 1

    host = Host(args.host_root)
    try:
        profile = _select_profile(host, args)
        log.step(f"Using profile {profile.name}")
        report = _run_provisioners(host, profile)
        if args.report_dir is not None:
            _write_report(report, args)

        if args.no_install:
            return 0
        if not profile.installer_url:
            log.warn(f"Profile {profile.name} has no installer URL, stopping here")
            return 0
        print(file=sys.stderr)
        if not args.yes and not confirm():
            return 0
        handoff(host, profile.installer_url, profile.installer_path)
    except ProvisionError as e:
        log.fail(str(e))
        return 1
    except OSError as e:
        log.fail(str(e))
        return 1
    except KeyboardInterrupt:
        log.fail("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
