"""
Renderers turn a ProvisionReport into human-readable files in output_dir.
"""

from pathlib import Path

from jinja2 import Environment

from ..schema import ProvisionReport
from .summary import render as render_summary


def _environment() -> Environment:
    return Environment(trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)


def run_all(report: ProvisionReport, output_dir: Path) -> None:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    env = _environment()
    render_summary(report, env, output_dir)
