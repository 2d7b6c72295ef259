from __future__ import annotations

import csv
from dataclasses import asdict, fields
from pathlib import Path
from typing import Iterable

from payroll_engine.payroll.reports import DepartmentReportRow


def export_report_csv(rows: Iterable[DepartmentReportRow], output_path: Path) -> Path:
    if output_path.suffix.lower() != ".csv":
        raise ValueError("Unsupported export format. Use .csv")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=[f.name for f in fields(DepartmentReportRow)])
        writer.writeheader()
        for row in rows:
            writer.writerow({key: str(value) for key, value in asdict(row).items()})
    return output_path
