"""Console progress output. Everything goes to stderr so stdout stays clean."""

import os
import sys

PREFIX = "[hostprep]"


def _debug_enabled() -> bool:
    return bool(os.environ.get("HOSTPREP_DEBUG", ""))


def _emit(msg: str) -> None:
    print(f"{PREFIX} {msg}", file=sys.stderr)


def step(msg: str) -> None:
    _emit(f"==> {msg}")


def substep(msg: str) -> None:
    _emit(f"    - {msg}")


def success(msg: str) -> None:
    _emit(f"ok: {msg}")


def warn(msg: str) -> None:
    _emit(f"warning: {msg}")


def fail(msg: str) -> None:
    _emit(f"error: {msg}")


def debug(msg: str) -> None:
    if _debug_enabled():
        _emit(f"debug: {msg}")
