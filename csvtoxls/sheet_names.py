"""
Worksheet naming rules.

Spreadsheet applications limit sheet names to 31 characters, forbid the
characters ``[ ] * ? / \\ : '`` and compare names case-insensitively.
"""

from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

MAX_SHEET_NAME_LENGTH = 31
INVALID_SHEET_CHARS = frozenset("[]*?/\\:'")
FALLBACK_SHEET_NAME = "Sheet"
CSV_EXTENSION = ".csv"


def sanitize_sheet_name(name: str) -> str:
    """
    Make a legal sheet name out of an arbitrary string.

    The name is truncated to 31 characters, every invalid character is replaced
    by an underscore and an empty result becomes ``"Sheet"``. Legal names are
    returned unchanged.

    Args:
        name: Candidate name, usually a file name without extension

    Returns:
        str: A legal sheet name
    """
    name = name[:MAX_SHEET_NAME_LENGTH]
    name = "".join("_" if c in INVALID_SHEET_CHARS else c for c in name)
    return name or FALLBACK_SHEET_NAME


def sheet_name_for(path: Union[str, Path]) -> str:
    """Return the base name of a CSV path with its extension removed."""
    name = Path(path).name
    if name.lower().endswith(CSV_EXTENSION):
        return name[:-len(CSV_EXTENSION)]
    return Path(name).stem


class SheetNameRegistry:
    """Names already assigned to sheets of one workbook."""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names = {}
        for name in names or ():
            self._names.setdefault(name.casefold(), name)

    def __contains__(self, name: str) -> bool:
        return name.casefold() in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def add(self, name: str) -> None:
        self._names.setdefault(name.casefold(), name)

    def derive(self, base_name: str) -> str:
        """
        Derive a legal sheet name that is not yet registered, and register it.

        Collisions are resolved by appending ``_1``, ``_2``, ... and truncating
        the base so that the suffixed name still fits in 31 characters.

        Args:
            base_name: File name without extension

        Returns:
            str: The registered sheet name
        """
        original = sanitize_sheet_name(base_name)
        name = original
        counter = 1
        while name in self:
            suffix = f"_{counter}"
            name = original[:MAX_SHEET_NAME_LENGTH - len(suffix)] + suffix
            counter += 1

        self.add(name)
        return name


def derive_sheet_name(base_name: str, existing: Optional[SheetNameRegistry] = None) -> str:
    """
    Derive a sheet name for ``base_name``.

    Without a registry the name is only sanitized. With one, the name is also
    made unique within it and registered.
    """
    if existing is None:
        return sanitize_sheet_name(base_name)
    return existing.derive(base_name)
