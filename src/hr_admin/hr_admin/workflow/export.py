from __future__ import annotations

import io
from typing import List, Sequence

import pandas as pd

from .definition import ResourceDefinition
from .model import RequestRecord

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_LEADING_COLUMNS = (
    ("id", "ID"),
    ("employee_name", "Employee"),
    ("department", "Department"),
)
_TRAILING_COLUMNS = (
    ("reason", "Reason"),
    ("status", "Status"),
    ("remarks", "Remarks"),
    ("approved_by", "Approved By"),
    ("approved_at", "Approved At"),
    ("created_at", "Created At"),
)


def export_headers(definition: ResourceDefinition) -> List[tuple]:
    detail_columns = [(spec.name, spec.label) for spec in definition.column_specs]
    return list(_LEADING_COLUMNS) + detail_columns + list(_TRAILING_COLUMNS)


def build_workbook(definition: ResourceDefinition, records: Sequence[RequestRecord]) -> io.BytesIO:
    """Write the records to an in-memory .xlsx file, one sheet, header row first."""

    headers = export_headers(definition)
    rows = []
    for record in records:
        data = record.to_dict()
        data["status"] = record.status.value.replace("_", " ").title()
        rows.append({label: data.get(key) for key, label in headers})

    df = pd.DataFrame(rows, columns=[label for _, label in headers])

    output = io.BytesIO()
    # Excel caps sheet titles at 31 characters.
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=definition.label[:31])
    output.seek(0)
    return output
