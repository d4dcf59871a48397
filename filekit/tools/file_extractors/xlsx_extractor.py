from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence
import csv
import io

import xlrd
from openpyxl import load_workbook

from ...errors import EXCEL_STAGE, collaborator_stage
from .signatures import DOC_OLD, has_signature


Row = Sequence[Any]


@dataclass
class WorkbookData:
    sheet_names: List[str] = field(default_factory=list)
    sheets: Dict[str, List[Row]] = field(default_factory=dict)


def read_xlsx_workbook(content: bytes) -> WorkbookData:
    wb = load_workbook(io.BytesIO(content), data_only=True, read_only=True)
    try:
        data = WorkbookData()
        for ws in wb.worksheets:
            data.sheet_names.append(ws.title)
            data.sheets[ws.title] = [tuple(r) for r in ws.iter_rows(values_only=True)]
        return data
    finally:
        wb.close()


def read_xls_workbook(content: bytes) -> WorkbookData:
    book = xlrd.open_workbook(file_contents=content)
    data = WorkbookData()
    for idx in range(book.nsheets):
        sheet = book.sheet_by_index(idx)
        data.sheet_names.append(sheet.name)
        data.sheets[sheet.name] = [tuple(sheet.row_values(r)) for r in range(sheet.nrows)]
    return data


def _cell(v: Any) -> str:
    if v is None:
        return ""
    # xlrd hands back whole numbers as floats
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def rows_to_csv(rows: Iterable[Row]) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    for row in rows:
        w.writerow([_cell(v) for v in row])
    return buf.getvalue().rstrip("\n")


def workbook_to_text(data: WorkbookData) -> str:
    parts = []
    for name in data.sheet_names:
        parts.append(f"Sheet: {name}\n{rows_to_csv(data.sheets.get(name, []))}\n\n")
    return "".join(parts)


def extract_xlsx(content: bytes) -> str:
    """
    Excel strategy for xls/xlsx verdicts. Every sheet, in workbook order,
    rendered as CSV under a "Sheet: <name>" header.
    """
    with collaborator_stage(EXCEL_STAGE):
        if has_signature(content, DOC_OLD):
            data = read_xls_workbook(content)
        else:
            data = read_xlsx_workbook(content)
        return workbook_to_text(data)
