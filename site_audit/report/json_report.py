# site_audit/report/json_report.py

"""
JSON report generation for SiteAudit.

Serializes an AuditReport to a file.
"""
import json
from pathlib import Path
from site_audit.aggregator import AuditReport


def render_json(report: AuditReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: AuditReport of one audit run
    :param output_path: path of the JSON file
    :param pretty: indent the output by 2
    :return: Path of the saved file

    Example:
    ```python
    from site_audit.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.as_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
