"""Report persistence: provision-report.json in and out."""

from pathlib import Path

from .schema import ProvisionReport

REPORT_FILENAME = "provision-report.json"


def save_report(report: ProvisionReport, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.model_dump_json(indent=2))


def load_report(path: Path) -> ProvisionReport:
    return ProvisionReport.model_validate_json(Path(path).read_text())
