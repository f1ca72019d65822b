from __future__ import annotations

import csv
import io

import pandas as pd

EXPORT_COLUMNS = [
    "date",
    "roll_no",
    "student_name",
    "class_name",
    "subject",
    "status",
    "remarks",
]

EXPORT_HEADERS = {
    "date": "Date",
    "roll_no": "Roll No",
    "student_name": "Student",
    "class_name": "Class",
    "subject": "Subject",
    "status": "Status",
    "remarks": "Remarks",
}


def rows_to_csv(rows: list[dict]) -> bytes:
    """CSV with a BOM so spreadsheet apps pick up UTF-8 names."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def rows_to_xlsx(rows: list[dict]) -> bytes:
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS).rename(columns=EXPORT_HEADERS)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
    return out.getvalue()
