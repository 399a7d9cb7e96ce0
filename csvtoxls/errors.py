"""
Exception types raised while converting CSV files to workbooks.
"""

from pathlib import Path
from typing import Optional, Union


def _with_path(path, message: str) -> str:
    if path is None:
        return message
    return f"conversion failed for {path}: {message}"


class CsvToXlsError(Exception):
    """Base class for every conversion failure."""


class NotFoundError(CsvToXlsError, FileNotFoundError):
    """A source file or directory does not exist."""


class InvalidExtensionError(CsvToXlsError, ValueError):
    """A source file does not carry the .csv extension."""


class RecordReadError(CsvToXlsError):
    """A CSV record could not be read.

    Attributes:
        row: 1-based index of the record that failed
        cause: The underlying exception
        path: CSV file being read, when known
    """

    def __init__(self, row: int, cause: BaseException, path: Optional[Union[str, Path]] = None):
        self.row = row
        self.cause = cause
        self.path = Path(path) if path is not None else None
        super().__init__(_with_path(path, f"error reading CSV at row {row}: {cause}"))


class WorkbookError(CsvToXlsError):
    """The spreadsheet backend rejected an operation."""


class CellWriteError(WorkbookError):
    """A value could not be written into a cell."""

    def __init__(self, row: int, column: int, cause: BaseException, path: Optional[Union[str, Path]] = None):
        self.row = row
        self.column = column
        self.cause = cause
        self.path = Path(path) if path is not None else None
        super().__init__(_with_path(path, f"error setting cell value at row {row}, column {column}: {cause}"))


class SheetCreationError(WorkbookError):
    """A sheet could not be created under the requested name."""

    def __init__(self, name: str, cause: Union[str, BaseException]):
        self.name = name
        self.cause = cause
        super().__init__(f"unable to create sheet {name}: {cause}")


class PersistError(WorkbookError):
    """A workbook could not be written to disk."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"error saving Excel file {path}: {cause}")
