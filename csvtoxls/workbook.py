"""
Spreadsheet backend used by the converter.

The converter only talks to a ``SheetBook``: a narrow set of sheet, cell and
column operations plus saving. ``OpenpyxlBook`` implements it on top of
openpyxl.
"""

from pathlib import Path
from typing import List, Optional, Protocol, Union

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from .errors import PersistError, SheetCreationError, WorkbookError
from .sheet_names import INVALID_SHEET_CHARS, MAX_SHEET_NAME_LENGTH

MAX_ROWS = 1048576


class SheetBook(Protocol):
    """Operations the converter needs from a workbook."""

    @property
    def sheet_names(self) -> List[str]:
        ...

    @property
    def active_sheet(self) -> Optional[str]:
        ...

    def create_sheet(self, name: str) -> None:
        ...

    def delete_sheet(self, name: str) -> None:
        ...

    def rename_sheet(self, name: str, new_name: str) -> None:
        ...

    def set_active_sheet(self, name: str) -> None:
        ...

    def write_cell(self, sheet: str, column: int, row: int, value: str) -> None:
        ...

    def set_column_width(self, sheet: str, column: int, width: float) -> None:
        ...

    def save(self, path: Union[str, Path]) -> None:
        ...


class OpenpyxlBook:
    """A ``SheetBook`` backed by an in-memory ``openpyxl.Workbook``.

    A new book holds a single placeholder sheet, as openpyxl workbooks always do.
    """

    def __init__(self):
        self.workbook = Workbook()

    @property
    def sheet_names(self) -> List[str]:
        return list(self.workbook.sheetnames)

    @property
    def active_sheet(self) -> Optional[str]:
        ws = self.workbook.active
        return ws.title if ws is not None else None

    def _sheet(self, name: str):
        if name not in self.workbook.sheetnames:
            raise WorkbookError(f"sheet {name} does not exist")
        return self.workbook[name]

    def _check_title(self, name: str) -> None:
        if not name:
            raise SheetCreationError(name, "sheet name is empty")
        if len(name) > MAX_SHEET_NAME_LENGTH:
            raise SheetCreationError(name, f"sheet name exceeds {MAX_SHEET_NAME_LENGTH} characters")
        bad = sorted(set(name) & INVALID_SHEET_CHARS)
        if bad:
            raise SheetCreationError(name, f"invalid characters {''.join(bad)!r} in sheet name")
        if name.casefold() in (title.casefold() for title in self.workbook.sheetnames):
            raise SheetCreationError(name, "a sheet with this name already exists")

    def create_sheet(self, name: str) -> None:
        self._check_title(name)
        try:
            self.workbook.create_sheet(title=name)
        except ValueError as e:
            raise SheetCreationError(name, e) from e

    def delete_sheet(self, name: str) -> None:
        ws = self._sheet(name)
        if len(self.workbook.sheetnames) == 1:
            raise WorkbookError(f"cannot delete {name}: a workbook needs at least one sheet")

        # openpyxl keeps the active index as-is when a sheet is removed
        active = self.active_sheet
        self.workbook.remove(ws)
        if active in self.workbook.sheetnames:
            self.set_active_sheet(active)
        else:
            self.set_active_sheet(self.workbook.sheetnames[0])

    def rename_sheet(self, name: str, new_name: str) -> None:
        ws = self._sheet(name)
        if new_name.casefold() != name.casefold():
            self._check_title(new_name)
        ws.title = new_name

    def set_active_sheet(self, name: str) -> None:
        self._sheet(name)
        self.workbook.active = self.workbook.sheetnames.index(name)
        for ws in self.workbook.worksheets:
            ws.sheet_view.tabSelected = ws.title == name

    def write_cell(self, sheet: str, column: int, row: int, value: str) -> None:
        ws = self._sheet(sheet)
        try:
            get_column_letter(column)
            if not 1 <= row <= MAX_ROWS:
                raise ValueError(f"row {row} is out of range")
            cell = ws.cell(row=row, column=column, value=value)
        except (ValueError, IllegalCharacterError) as e:
            raise WorkbookError(str(e) or type(e).__name__) from e

        # Values such as "=1+2" are stored as text, not formulas
        if cell.data_type == "f":
            cell.data_type = "s"

    def set_column_width(self, sheet: str, column: int, width: float) -> None:
        ws = self._sheet(sheet)
        try:
            letter = get_column_letter(column)
        except ValueError as e:
            raise WorkbookError(str(e)) from e
        ws.column_dimensions[letter].width = width

    def save(self, path: Union[str, Path]) -> None:
        try:
            self.workbook.save(path)
        except OSError as e:
            raise PersistError(path, e) from e
