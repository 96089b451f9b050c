"""Filesystem layout: owned directories and symlinks that move state onto /data.

A link path that already exists as real data is never removed or replaced.
"""

from .. import log
from ..host import Host
from ..schema import DirectorySpec, LinkSpec, StepResult, StepStatus


def _apply_perms(host: Host, path: str, mode, uid, gid) -> None:
    if mode is not None:
        host.chmod(path, mode)
    if uid is not None or gid is not None:
        host.chown(path, -1 if uid is None else uid, -1 if gid is None else gid)


def ensure_directory(host: Host, spec: DirectorySpec) -> StepResult:
    if host.path(spec.path).is_dir():
        return StepResult(kind="directory", target=spec.path, status=StepStatus.EXISTS)
    host.makedirs(spec.path)
    _apply_perms(host, spec.path, spec.mode, spec.uid, spec.gid)
    log.substep(f"Created {spec.path}")
    return StepResult(kind="directory", target=spec.path, status=StepStatus.CREATED)


def ensure_link(host: Host, spec: LinkSpec) -> StepResult:
    # Checked before exists(): a dangling link is still our link
    if host.is_symlink(spec.link):
        log.success(f"{spec.link} is already a symlink")
        return StepResult(kind="link", target=spec.link, status=StepStatus.EXISTS)

    if host.exists(spec.link):
        msg = f"{spec.link} already exists - cannot link to data volume"
        log.warn(msg)
        return StepResult(kind="link", target=spec.link, status=StepStatus.SKIPPED, detail=msg)

    host.makedirs(spec.target)
    parent = host.path(spec.link).parent
    parent.mkdir(parents=True, exist_ok=True)
    host.symlink(spec.link, spec.target)
    _apply_perms(host, spec.target, spec.mode, spec.uid, spec.gid)
    log.success(f"Linked {spec.link} to data volume")
    return StepResult(kind="link", target=spec.link, status=StepStatus.CREATED, detail=spec.target)
