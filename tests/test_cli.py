"""
Tests verifying every CLI flag is parsed and wired through to behavior.
"""

import os
from pathlib import Path

import pytest

import hostprep.__main__ as main_mod
from hostprep.cli import parse_args
from hostprep.host import Host
from hostprep.pipeline import REPORT_FILENAME

from conftest import add_disk, write_file

LUN0 = "/dev/disk/azure/scsi1/lun0"


def test_defaults():
    args = parse_args([])
    assert args.profile == "auto"
    assert args.profile_file is None
    assert args.host_root == Path("/")
    assert args.report_dir is None
    assert args.installer_url is None
    assert args.no_install is False
    assert args.yes is False


def test_all_flags_set():
    args = parse_args([
        "--profile", "azure",
        "--profile-file", "/tmp/profile.json",
        "--host-root", "/mnt/host",
        "--report-dir", "/tmp/out",
        "--installer-url", "https://example.com/install.sh",
        "--no-install",
        "--yes",
    ])
    assert args.profile == "azure"
    assert args.profile_file == Path("/tmp/profile.json")
    assert args.host_root == Path("/mnt/host")
    assert args.report_dir == Path("/tmp/out")
    assert args.installer_url == "https://example.com/install.sh"
    assert args.no_install is True
    assert args.yes is True


def test_unknown_profile_rejected():
    with pytest.raises(SystemExit) as exc:
        parse_args(["--profile", "gcp"])
    assert exc.value.code == 2


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr(os, "geteuid", lambda: 0)


@pytest.fixture
def wired(monkeypatch, fake, chowns):
    """Route main()'s Host through the fake executor and capture the handoff."""
    monkeypatch.setattr(main_mod, "Host", lambda root: Host(root, fake))
    handoffs = []
    monkeypatch.setattr(main_mod, "handoff", lambda host, url, dest: handoffs.append((url, dest)))
    return handoffs


def test_requires_root(monkeypatch, host_root, wired, fake):
    monkeypatch.setattr(os, "geteuid", lambda: 1000)
    assert main_mod.main(["--host-root", str(host_root), "--no-install"]) == 1
    assert fake.calls == []


def test_missing_required_disk_exits_nonzero(as_root, host_root, wired, fake):
    assert main_mod.main(["--host-root", str(host_root), "--profile", "azure", "--yes"]) == 1
    assert fake.mounted == set()
    assert wired == []


def test_no_install_stops_after_provisioning(as_root, host_root, wired, fake, tmp_path):
    add_disk(host_root, LUN0)
    out = tmp_path / "report"
    rc = main_mod.main(["--host-root", str(host_root), "--no-install", "--report-dir", str(out)])
    assert rc == 0
    assert fake.mounted == {"/data"}
    assert (out / REPORT_FILENAME).exists()
    assert (out / "provision-summary.md").exists()
    assert wired == []


def test_auto_detects_azure(as_root, host_root, wired, fake, tmp_path):
    add_disk(host_root, LUN0)
    out = tmp_path / "report"
    main_mod.main(["--host-root", str(host_root), "--no-install", "--report-dir", str(out)])
    assert '"profile": "azure"' in (out / REPORT_FILENAME).read_text()


def test_declined_prompt_exits_cleanly(monkeypatch, as_root, host_root, wired):
    add_disk(host_root, LUN0)
    monkeypatch.setattr(main_mod, "confirm", lambda: False)
    assert main_mod.main(["--host-root", str(host_root)]) == 0
    assert wired == []


def test_confirmed_prompt_hands_off(monkeypatch, as_root, host_root, wired):
    add_disk(host_root, LUN0)
    monkeypatch.setattr(main_mod, "confirm", lambda: True)
    assert main_mod.main(["--host-root", str(host_root)]) == 0
    assert wired == [("https://k8s.kurl.sh/ai-auditor", "/root/kurl.sh")]


def test_yes_and_installer_url(monkeypatch, as_root, host_root, wired):
    add_disk(host_root, LUN0)
    monkeypatch.setattr(main_mod, "confirm", lambda: pytest.fail("should not prompt"))
    rc = main_mod.main(["--host-root", str(host_root), "--yes", "--installer-url", "https://example.com/i.sh"])
    assert rc == 0
    assert wired == [("https://example.com/i.sh", "/root/kurl.sh")]


def test_bad_profile_file_exits_nonzero(as_root, host_root, wired, tmp_path):
    bad = tmp_path / "profile.json"
    bad.write_text('{"name": "x"}')
    assert main_mod.main(["--host-root", str(host_root), "--profile-file", str(bad), "--no-install"]) == 1


def test_filesystem_error_is_reported_not_raised(as_root, host_root, wired, capsys):
    add_disk(host_root, LUN0)
    # A plain file where the docker link target directory should go
    write_file(host_root, "/data/docker", "")
    assert main_mod.main(["--host-root", str(host_root), "--no-install"]) == 1
    assert "error:" in capsys.readouterr().err
    assert wired == []
