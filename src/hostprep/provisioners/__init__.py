"""
Provisioners bring the host to the state a profile describes.
Each one receives the Host and returns step results for the report.
Order matters: volumes (discovery -> LVM -> mount), then directories, then links.
"""

import socket
from datetime import datetime, timezone

from ..host import Host
from ..schema import ProvisionReport, Profile, StepStatus

from .layout import ensure_directory, ensure_link
from .mounts import ensure_mounted


def run_all(host: Host, profile: Profile) -> ProvisionReport:
    """Run every provisioning step for the profile. ProvisionError aborts the run."""
    report = ProvisionReport(
        meta={
            "host_root": str(host.host_root),
            "hostname": socket.gethostname(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        profile=profile.name,
    )

    for volume in profile.volumes:
        for result in ensure_mounted(host, volume, profile.disks):
            report.steps.append(result)
            if result.status == StepStatus.SKIPPED:
                report.warnings.append({"source": "mounts", "message": result.detail, "severity": "warning"})

    for directory in profile.directories:
        report.steps.append(ensure_directory(host, directory))

    for link in profile.links:
        result = ensure_link(host, link)
        report.steps.append(result)
        if result.status == StepStatus.SKIPPED:
            report.warnings.append({"source": "layout", "message": result.detail, "severity": "warning"})

    return report
