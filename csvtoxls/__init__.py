"""
csvtoxls - Convert semicolon-separated CSV files into XLSX workbooks.

This library converts:
- A single CSV file into a workbook next to it
- Every CSV file under a directory into its own workbook
- Every CSV file under a directory into one workbook with a sheet per file

Column widths are sized to their content and sheet names are made legal and
unique.

Example:
    from csvtoxls import CsvConverter

    converter = CsvConverter()
    xlsx_path = converter.convert_file('data.csv')
    summary = converter.merge_directory('exports/')
"""

from .converter import ConversionSummary, CsvConverter, CsvConverterConfig
from .errors import (
    CellWriteError,
    CsvToXlsError,
    InvalidExtensionError,
    NotFoundError,
    PersistError,
    RecordReadError,
    SheetCreationError,
    WorkbookError,
)
from .sheet_names import SheetNameRegistry, derive_sheet_name, sanitize_sheet_name
from .workbook import OpenpyxlBook, SheetBook

__version__ = "0.1.0"
__all__ = [
    "CsvConverter",
    "CsvConverterConfig",
    "ConversionSummary",
    "OpenpyxlBook",
    "SheetBook",
    "SheetNameRegistry",
    "derive_sheet_name",
    "sanitize_sheet_name",
    "CsvToXlsError",
    "NotFoundError",
    "InvalidExtensionError",
    "RecordReadError",
    "WorkbookError",
    "CellWriteError",
    "SheetCreationError",
    "PersistError",
]
