"""
Handoff to the cluster installer: confirm, download over HTTPS, exec.
What the installer does afterwards is not our concern.
"""

import os
import sys
from typing import Optional, TextIO

from . import log
from .host import Host

PROMPT = "Proceed with Kubernetes installation? [y/N] "


def _is_yes(answer: str) -> bool:
    return answer.strip().lower().startswith("y")


def confirm(prompt: str = PROMPT, tty: Optional[TextIO] = None) -> bool:
    """Ask for confirmation; anything but y/yes (including no terminal) declines.

    When stdin is not a terminal (e.g. the tool was piped into a shell) the
    answer is read from /dev/tty instead.
    """
    if tty is None and sys.stdin is not None and sys.stdin.isatty():
        try:
            print(prompt, end="", file=sys.stderr, flush=True)
            return _is_yes(input())
        except EOFError:
            return False
    try:
        stream = tty if tty is not None else open("/dev/tty")
    except OSError:
        log.warn("No terminal available for confirmation, not proceeding")
        return False
    try:
        print(prompt, end="", file=sys.stderr, flush=True)
        return _is_yes(stream.readline())
    finally:
        if tty is None:
            stream.close()


def fetch_installer(host: Host, url: str, dest: str) -> str:
    """Download url to dest (host path). Returns the local path."""
    local = host.path(dest)
    local.parent.mkdir(parents=True, exist_ok=True)
    host.check(["curl", "-fsSL", "-o", str(local), url])
    return str(local)


def handoff(host: Host, url: str, dest: str) -> None:
    """Fetch the installer and replace this process with it. Does not return."""
    log.step("Fetching Replicated (kURL/KOTS) installer.")
    local = fetch_installer(host, url, dest)
    log.success("Downloaded installer.")
    sys.stdout.flush()
    sys.stderr.flush()
    os.execvp("bash", ["bash", local])
