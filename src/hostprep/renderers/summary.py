"""provision-summary.md renderer: what was created, what already existed, what was skipped."""

from pathlib import Path

from jinja2 import Environment

from ..schema import ProvisionReport, StepStatus

SUMMARY_FILENAME = "provision-summary.md"

TEMPLATE = """\
# Provisioning summary

- Profile: **{{ report.profile or "unknown" }}**
{% if report.meta.hostname %}
- Host: `{{ report.meta.hostname }}`
{% endif %}
{% if report.meta.timestamp %}
- Run at: {{ report.meta.timestamp }}
{% endif %}
- Created: {{ counts.created }}, already present: {{ counts.exists }}, skipped: {{ counts.skipped }}

## Steps

{% if report.steps %}
| Kind | Target | Status | Detail |
|------|--------|--------|--------|
{% for s in report.steps %}
| {{ s.kind }} | `{{ s.target }}` | {{ s.status.value }} | {{ s.detail or "" }} |
{% endfor %}
{% else %}
No steps were run.
{% endif %}
{% if report.warnings %}

## Warnings

{% for w in report.warnings %}
- {{ w.message or "-" }}
{% endfor %}
{% endif %}
"""


def render(
    report: ProvisionReport,
    env: Environment,
    output_dir: Path,
) -> None:
    output_dir = Path(output_dir)
    counts = {status.value: 0 for status in StepStatus}
    for s in report.steps:
        counts[s.status.value] += 1
    text = env.from_string(TEMPLATE).render(report=report, counts=counts)
    (output_dir / SUMMARY_FILENAME).write_text(text)
