"""Fatal provisioning errors. Anything raised from here aborts the run with exit code 1."""

from typing import List

from .executor import RunResult


class ProvisionError(Exception):
    """A required resource could not be provisioned."""


class CommandError(ProvisionError):
    """An external command failed where success was required."""

    def __init__(self, cmd: List[str], result: RunResult):
        self.cmd = list(cmd)
        self.result = result
        detail = result.stderr.strip() or result.stdout.strip()
        msg = f"`{' '.join(cmd)}` failed with exit code {result.returncode}"
        if detail:
            msg += f": {detail.splitlines()[-1]}"
        super().__init__(msg)


class DiskNotFoundError(ProvisionError):
    """No unused data disk is available for a required volume group."""

    def __init__(self, volume_group: str):
        self.volume_group = volume_group
        super().__init__(f"Could not find an unused data disk for {volume_group}")


class ProfileError(ProvisionError):
    """Unknown profile name or invalid profile file."""
