"""
Shared fixtures: a fake executor that simulates LVM and mount state, and a
tmp_path host root holding fake /dev, /proc and /etc files. No real commands run.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

from hostprep.executor import RunResult
from hostprep.host import Host

QUERY_COMMANDS = {"lvdisplay", "vgdisplay", "pvdisplay", "pvs", "blkid", "mountpoint"}


def _ok(stdout: str = "") -> RunResult:
    return RunResult(stdout=stdout, stderr="", returncode=0)


def _err(msg: str, rc: int = 5) -> RunResult:
    return RunResult(stdout="", stderr=msg, returncode=rc)


class FakeSystem:
    """Executor that keeps LVM and mount state in memory."""

    def __init__(self):
        self.pvs: Set[str] = set()
        self.vgs: Dict[str, str] = {}  # vg -> backing device
        self.lvs: Set[str] = set()  # "vg/lv"
        self.formatted: List[str] = []
        self.mounted: Set[str] = set()
        self.calls: List[List[str]] = []
        self.fail: Dict[str, int] = {}  # tool -> returncode to simulate failure
        self.missing: Set[str] = set()  # tools that are "not installed"

    def __call__(self, cmd, cwd=None):
        self.calls.append(list(cmd))
        tool = cmd[0]
        if tool in self.missing:
            return RunResult(stdout="", stderr="Command not found", returncode=127)
        if tool in self.fail:
            return _err(f"{tool}: simulated failure", self.fail[tool])
        handler = getattr(self, "_" + tool.replace(".", "_"), None)
        if handler is None:
            return _err("unknown command", 1)
        return handler(cmd[1:])

    # queries
    def _lvdisplay(self, args):
        return _ok() if args[0] in self.lvs else _err(f"Failed to find logical volume \"{args[0]}\"")

    def _vgdisplay(self, args):
        return _ok() if args[0] in self.vgs else _err(f"Volume group \"{args[0]}\" not found")

    def _pvdisplay(self, args):
        return _ok() if args[0] in self.pvs else _err(f"Failed to find physical volume \"{args[0]}\"")

    def _mountpoint(self, args):
        return _ok() if args[-1] in self.mounted else _err(f"{args[-1]} is not a mountpoint", 32)

    def _pvs(self, args):
        # --noheadings -o pv_name,vg_name; a PV without a group has no second column
        owners = {dev: vg for vg, dev in self.vgs.items()}
        return _ok("".join(f"  {pv} {owners.get(pv, '')}\n" for pv in sorted(self.pvs)))

    def _blkid(self, args):
        # blkid exits 2 when the device carries no signature
        return _ok("xfs\n") if args[-1] in self.formatted else _err("", 2)

    # mutations
    def _pvcreate(self, args):
        if args[0] in self.pvs:
            return _err("already a physical volume")
        self.pvs.add(args[0])
        return _ok()

    def _vgcreate(self, args):
        vg, dev = args[0], args[1]
        if vg in self.vgs or dev not in self.pvs:
            return _err("cannot create volume group")
        self.vgs[vg] = dev
        return _ok()

    def _lvcreate(self, args):
        # lvcreate --extents +100%FREE <vg> --name <lv> --activate y
        vg, lv = args[2], args[4]
        if vg not in self.vgs or f"{vg}/{lv}" in self.lvs:
            return _err("cannot create logical volume")
        self.lvs.add(f"{vg}/{lv}")
        return _ok()

    def _mkfs_xfs(self, args):
        self.formatted.append(args[0])
        return _ok()

    def _mount(self, args):
        self.mounted.add(args[-1])
        return _ok()

    def _curl(self, args):
        dest = Path(args[args.index("-o") + 1])
        dest.write_text("#!/bin/bash\necho installer\n")
        return _ok()

    def mutating_calls(self) -> List[List[str]]:
        return [c for c in self.calls if c[0] not in QUERY_COMMANDS]

    def tools_called(self) -> List[str]:
        return [c[0] for c in self.mutating_calls()]


def add_disk(root: Path, path: str, target: Optional[str] = None) -> None:
    """Create a fake device node; with target, path becomes a relative symlink to it."""
    p = root / path.lstrip("/")
    p.parent.mkdir(parents=True, exist_ok=True)
    if target is None:
        p.touch()
        return
    t = root / target.lstrip("/")
    t.parent.mkdir(parents=True, exist_ok=True)
    t.touch()
    os.symlink(os.path.relpath(t, p.parent), p)


def write_file(root: Path, path: str, text: str) -> Path:
    p = root / path.lstrip("/")
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text)
    return p


@pytest.fixture(autouse=True)
def _quiet_debug(monkeypatch):
    monkeypatch.delenv("HOSTPREP_DEBUG", raising=False)


@pytest.fixture
def fake() -> FakeSystem:
    return FakeSystem()


@pytest.fixture
def host_root(tmp_path) -> Path:
    root = tmp_path / "host"
    write_file(root, "/proc/mounts", "/dev/sda1 / ext4 rw,relatime 0 0\nproc /proc proc rw 0 0\n")
    write_file(root, "/proc/swaps", "Filename\t\t\t\tType\t\tSize\t\tUsed\t\tPriority\n")
    write_file(root, "/proc/mdstat", "Personalities : \nunused devices: <none>\n")
    write_file(root, "/etc/fstab", "UUID=1234 / ext4 defaults 0 1\n")
    return root


@pytest.fixture
def host(host_root, fake) -> Host:
    return Host(host_root, fake)


@pytest.fixture
def chowns(monkeypatch) -> List[tuple]:
    """Record os.chown calls instead of changing ownership (tests need not run as root)."""
    calls: List[tuple] = []
    monkeypatch.setattr(os, "chown", lambda path, uid, gid: calls.append((str(path), uid, gid)))
    return calls
