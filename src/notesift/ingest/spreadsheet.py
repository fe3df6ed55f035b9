"""Spreadsheet extractor — CSV via the csv module, .xlsx via openpyxl, .xls via xlrd.

All formats produce a banner with row/column counts and a bounded preview:
the first 10 rows serialised as ``Row k: <json>``. Further rows are counted
but not included verbatim.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any

import openpyxl
import xlrd

from notesift.ingest import banners
from notesift.ingest.base import BaseExtractor, Extraction, describe
from notesift.ingest.classifier import file_extension
from notesift.models import FileCategory, UploadedFile


def _to_json(row: Any) -> str:
    return json.dumps(row, ensure_ascii=False, separators=(",", ":"), default=str)


def _trim(cells: list[Any], blank: Any = None) -> list[Any]:
    while cells and cells[-1] == blank:
        cells.pop()
    return cells


def _excel_result(upload: UploadedFile, sheet_names: list[str], records: list[list[Any]]) -> Extraction:
    rows = [_to_json(record) for record in records]
    column_count = len(records[0]) if records else 0
    return Extraction(
        content=banners.excel_file(
            upload.name, sheet_names, sheet_names[0], rows, column_count, upload.size
        ),
        metadata={"rows": len(rows), "worksheets": sheet_names},
    )


class SpreadsheetExtractor(BaseExtractor):
    category = FileCategory.SPREADSHEET

    def _extract(self, upload: UploadedFile) -> Extraction:
        ext = file_extension(upload.name)
        if ext == ".csv":
            return self._extract_csv(upload)
        if ext == ".xlsx":
            return self._extract_xlsx(upload)
        if ext == ".xls":
            return self._extract_xls(upload)
        return Extraction.unsupported(banners.unsupported_spreadsheet(upload.name, ext))

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_csv(upload: UploadedFile) -> Extraction:
        """Header row first; empty lines are skipped, delimiter-only lines are kept."""
        try:
            reader = csv.DictReader(io.StringIO(upload.text(), newline=""))
            records = [row for row in reader if any(v is not None for v in row.values())]
            columns = list(reader.fieldnames or [])
        except csv.Error as exc:
            return Extraction.failure(banners.csv_error(upload.name, describe(exc)), describe(exc))

        rows = [_to_json(record) for record in records]
        return Extraction(
            content=banners.csv_file(upload.name, columns, rows, upload.size),
            metadata={"rows": len(rows), "columns": columns},
        )

    # ------------------------------------------------------------------
    # Excel
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_xlsx(upload: UploadedFile) -> Extraction:
        """Rows of the first worksheet as JSON arrays (trailing empty cells dropped)."""
        try:
            workbook = openpyxl.load_workbook(
                io.BytesIO(upload.data), read_only=True, data_only=True
            )
        except Exception as exc:
            return Extraction.failure(banners.excel_error(upload.name, describe(exc)), describe(exc))

        try:
            sheet_names = list(workbook.sheetnames)
            sheet = workbook.worksheets[0]
            records: list[list[Any]] = []
            for values in sheet.iter_rows(values_only=True):
                cells = _trim(list(values))
                if cells:
                    records.append(cells)
        except Exception as exc:
            return Extraction.failure(banners.excel_error(upload.name, describe(exc)), describe(exc))
        finally:
            workbook.close()

        return _excel_result(upload, sheet_names, records)

    @staticmethod
    def _extract_xls(upload: UploadedFile) -> Extraction:
        """Excel 97-2003: same preview as .xlsx; xlrd reports empty cells as ''."""
        try:
            workbook = xlrd.open_workbook(file_contents=upload.data)
            sheet_names = list(workbook.sheet_names())
            sheet = workbook.sheet_by_index(0)
            records: list[list[Any]] = []
            for index in range(sheet.nrows):
                cells = _trim(list(sheet.row_values(index)), blank="")
                if cells:
                    records.append(cells)
        except Exception as exc:
            return Extraction.failure(banners.excel_error(upload.name, describe(exc)), describe(exc))

        return _excel_result(upload, sheet_names, records)
