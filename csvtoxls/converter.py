"""
CSV to XLSX converter implementation.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from pydantic import BaseModel, Field

from .errors import (
    CellWriteError,
    CsvToXlsError,
    InvalidExtensionError,
    NotFoundError,
    RecordReadError,
    WorkbookError,
)
from .reader import open_records
from .sheet_names import CSV_EXTENSION, SheetNameRegistry, derive_sheet_name, sheet_name_for
from .workbook import OpenpyxlBook, SheetBook

logger = logging.getLogger(__name__)

XLSX_EXTENSION = ".xlsx"
MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 100
WIDTH_PADDING = 1.2


class CsvConverterConfig(BaseModel):
    """Configuration for CSV conversion."""

    encoding: str = Field(
        default="utf-8-sig",
        description="Text encoding of the CSV files (a leading BOM is skipped)"
    )


class ConversionSummary(BaseModel):
    """Outcome of a directory conversion."""

    found: int = Field(default=0, description="Number of CSV files discovered")
    succeeded: int = Field(default=0, description="Files converted or sheets created")
    failed: int = Field(default=0, description="Files or sheets that failed")
    outputs: List[Path] = Field(default_factory=list, description="Workbooks written to disk")
    failures: List[str] = Field(default_factory=list, description="One message per failure")

    def record_failure(self, message: str) -> None:
        self.failed += 1
        self.failures.append(message)


def strip_quotes(value: str) -> str:
    """Remove one leading and one trailing double quote, if present."""
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def padded_width(value: str) -> int:
    """Estimated display width of a value: its character count plus 20%."""
    return int(len(value) * WIDTH_PADDING)


def clamp_width(width: int) -> int:
    """Clamp a content width to the allowed column width range."""
    if width < MIN_COLUMN_WIDTH:
        return MIN_COLUMN_WIDTH
    if width > MAX_COLUMN_WIDTH:
        return MAX_COLUMN_WIDTH
    return width


def _failure_message(csv_path: Path, error: Exception) -> str:
    if isinstance(error, (RecordReadError, CellWriteError)) and error.path is not None:
        return str(error)
    return f"conversion failed for {csv_path}: {error}"


def is_csv_path(path: Union[str, Path]) -> bool:
    return str(path).lower().endswith(CSV_EXTENSION)


def iter_csv_files(directory: Union[str, Path]) -> Iterator[Path]:
    """
    Walk a directory tree and yield every CSV file in it.

    Entries are visited in lexical order, depth first, so files and
    subdirectories of one directory are interleaved by name. Symbolic links
    to directories are not followed.

    Args:
        directory: Root of the walk

    Yields:
        Path: Files whose lowercased name ends in ``.csv``
    """
    for entry in sorted(Path(directory).iterdir(), key=lambda p: p.name):
        if entry.is_dir() and not entry.is_symlink():
            yield from iter_csv_files(entry)
        elif is_csv_path(entry.name):
            yield entry


class CsvConverter:
    """Convert semicolon-delimited CSV files into XLSX workbooks."""

    def __init__(
        self,
        config: Optional[CsvConverterConfig] = None,
        book_factory: Callable[[], SheetBook] = OpenpyxlBook,
    ):
        """
        Initialize the converter.

        Args:
            config: Optional configuration for the converter
            book_factory: Callable returning a fresh, empty workbook
        """
        self.config = config or CsvConverterConfig()
        self.book_factory = book_factory

    def fill_sheet(self, records: Iterable[List[str]], book: SheetBook, sheet_name: str) -> Dict[int, int]:
        """
        Write records into a sheet, one record per row starting at row 1.

        Each field has one leading and one trailing double quote stripped and is
        written as text. Doubled quotes inside a field are left as they are.

        Args:
            records: Records as produced by ``read_records``
            book: Workbook holding the sheet
            sheet_name: Target sheet, which must already exist

        Returns:
            Dict[int, int]: Maximum padded content width per 0-based column

        Raises:
            RecordReadError: If the record source fails
            CellWriteError: If a value cannot be written
        """
        column_widths: Dict[int, int] = {}

        for row_index, record in enumerate(records, 1):
            for col_index, value in enumerate(record):
                value = strip_quotes(value)

                try:
                    book.write_cell(sheet_name, col_index + 1, row_index, value)
                except WorkbookError as e:
                    raise CellWriteError(row_index, col_index + 1, e) from e

                # Pad the width a little for better appearance
                width = padded_width(value)
                column_widths[col_index] = max(column_widths.get(col_index, 0), width)

        return column_widths

    def apply_column_widths(self, book: SheetBook, sheet_name: str, column_widths: Dict[int, int]) -> None:
        """
        Set the width of every measured column, clamped to [8, 100].

        Columns missing from ``column_widths`` keep the default width.
        """
        for col_index, width in column_widths.items():
            book.set_column_width(sheet_name, col_index + 1, clamp_width(width))

    def convert_to_sheet(self, csv_file_path: Union[str, Path], book: SheetBook, sheet_name: str) -> Dict[int, int]:
        """
        Read a CSV file into an existing sheet.

        The file is closed before this returns, whatever the outcome.

        Returns:
            Dict[int, int]: Content widths as returned by ``fill_sheet``
        """
        try:
            with open_records(csv_file_path, self.config.encoding) as records:
                return self.fill_sheet(records, book, sheet_name)
        except RecordReadError as e:
            raise RecordReadError(e.row, e.cause, path=csv_file_path) from e.cause
        except CellWriteError as e:
            raise CellWriteError(e.row, e.column, e.cause, path=csv_file_path) from e.cause

    def _make_room(self, book: SheetBook, placeholder: str, sheet_name: str) -> str:
        """Rename the placeholder sheet if it holds ``sheet_name``; return its current name."""
        if placeholder.casefold() != sheet_name.casefold():
            return placeholder

        taken = {name.casefold() for name in book.sheet_names}
        taken.add(sheet_name.casefold())
        counter = 1
        while f"{placeholder}{counter}".casefold() in taken:
            counter += 1

        new_name = f"{placeholder}{counter}"
        book.rename_sheet(placeholder, new_name)
        logger.debug("Renamed placeholder sheet %s to %s", placeholder, new_name)
        return new_name

    def convert_file(self, csv_file_path: Union[str, Path], sheet_name: Optional[str] = None) -> Path:
        """
        Convert a single CSV file into a workbook next to it.

        The workbook gets the file's base name with an ``.xlsx`` extension and
        holds one sheet named after the file. An existing workbook is
        overwritten.

        Args:
            csv_file_path: Path to the CSV file
            sheet_name: Sheet name to use instead of the file's base name

        Returns:
            Path: The workbook written

        Raises:
            NotFoundError: If the file doesn't exist
            InvalidExtensionError: If the file is not a .csv file
            RecordReadError: If the CSV cannot be read
            WorkbookError: If the workbook cannot be built or saved
        """
        path = Path(csv_file_path)
        if not path.is_file():
            raise NotFoundError(f"file {path} does not exist")
        if not is_csv_path(path):
            raise InvalidExtensionError(f"file {path} is not a CSV file")

        base_name = sheet_name_for(path)
        sheet_name = derive_sheet_name(sheet_name or base_name)
        xlsx_file_path = path.with_name(base_name + XLSX_EXTENSION)

        book = self.book_factory()
        placeholder = self._make_room(book, book.sheet_names[0], sheet_name)
        book.create_sheet(sheet_name)

        column_widths = self.convert_to_sheet(path, book, sheet_name)
        self.apply_column_widths(book, sheet_name, column_widths)

        book.set_active_sheet(sheet_name)
        book.delete_sheet(placeholder)
        book.save(xlsx_file_path)

        logger.info("Conversion completed: %s -> %s", path, xlsx_file_path)
        return xlsx_file_path

    def _check_directory(self, directory: Union[str, Path]) -> Path:
        path = Path(directory)
        if not path.is_dir():
            raise NotFoundError(f"directory {path} does not exist")
        return path

    def convert_directory(self, directory: Union[str, Path]) -> ConversionSummary:
        """
        Convert every CSV file under a directory into its own workbook.

        A file that fails is logged and counted, and the walk goes on.

        Args:
            directory: Directory to walk recursively

        Returns:
            ConversionSummary: Counts and the workbooks written

        Raises:
            NotFoundError: If the directory doesn't exist
            OSError: If the directory tree cannot be walked
        """
        root = self._check_directory(directory)
        summary = ConversionSummary()

        for csv_path in iter_csv_files(root):
            summary.found += 1
            try:
                summary.outputs.append(self.convert_file(csv_path))
            except (CsvToXlsError, OSError) as e:
                message = _failure_message(csv_path, e)
                logger.error("ERROR: %s", message)
                summary.record_failure(message)
            else:
                summary.succeeded += 1

        if summary.found == 0:
            logger.warning("No CSV files found in %s", root)

        return summary

    def merge_directory(self, directory: Union[str, Path]) -> ConversionSummary:
        """
        Convert every CSV file under a directory into one sheet of a single workbook.

        The workbook is written to ``<directory>/<directory name>.xlsx``. Sheets
        are named after their files and made unique with ``_N`` suffixes. A file
        whose sheet cannot be created is skipped; a file that fails to convert
        leaves its sheet in place, possibly partially filled. The first sheet
        created becomes the active one. Nothing is written when no CSV file is
        found.

        Args:
            directory: Directory to walk recursively

        Returns:
            ConversionSummary: Counts and the workbook written

        Raises:
            NotFoundError: If the directory doesn't exist
            OSError: If the directory tree cannot be walked
            PersistError: If the workbook cannot be saved
        """
        root = self._check_directory(directory)
        summary = ConversionSummary()

        # Collect everything first; the workbook is written inside the same tree
        csv_files = list(iter_csv_files(root))
        summary.found = len(csv_files)
        if not csv_files:
            logger.warning("No CSV files found in %s", root)
            return summary

        xlsx_file_path = root / (root.resolve().name + XLSX_EXTENSION)

        book = self.book_factory()
        placeholder = book.sheet_names[0]
        registry = SheetNameRegistry()
        first_sheet = None

        for csv_path in csv_files:
            sheet_name = registry.derive(sheet_name_for(csv_path))

            try:
                placeholder = self._make_room(book, placeholder, sheet_name)
                book.create_sheet(sheet_name)
            except WorkbookError as e:
                message = str(e)
                logger.error("ERROR: %s", message)
                summary.record_failure(message)
                continue

            if first_sheet is None:
                first_sheet = sheet_name

            try:
                column_widths = self.convert_to_sheet(csv_path, book, sheet_name)
                self.apply_column_widths(book, sheet_name, column_widths)
            except (CsvToXlsError, OSError) as e:
                message = _failure_message(csv_path, e)
                logger.error("ERROR: %s", message)
                summary.record_failure(message)
                continue

            logger.info("Sheet '%s' created from %s", sheet_name, csv_path)
            summary.succeeded += 1

        if first_sheet is not None:
            book.set_active_sheet(first_sheet)
            book.delete_sheet(placeholder)

        book.save(xlsx_file_path)
        summary.outputs.append(xlsx_file_path)
        logger.info("Excel file created: %s", xlsx_file_path)

        return summary
