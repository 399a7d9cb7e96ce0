"""
Read converted workbooks back for inspection.
"""

from pathlib import Path
from typing import Dict, Union

import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils import get_column_letter


def read_workbook(file_path: Union[str, Path]) -> Dict[str, pd.DataFrame]:
    """
    Load every sheet of a workbook as text.

    Args:
        file_path: Path to the XLSX file

    Returns:
        Dict[str, pd.DataFrame]: One DataFrame per sheet, in workbook order, with
        Excel-style column letters and empty strings for missing cells

    Raises:
        FileNotFoundError: If the workbook doesn't exist
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    frames = pd.read_excel(
        path, sheet_name=None, header=None, dtype=str,
        keep_default_na=False, engine='openpyxl'
    )

    for sheet_name, df in frames.items():
        df = df.fillna('')
        # Rename columns to Excel-style letters
        df.columns = [get_column_letter(i + 1) for i in range(len(df.columns))]
        frames[sheet_name] = df

    return frames


def read_column_widths(file_path: Union[str, Path]) -> Dict[str, Dict[str, float]]:
    """Return the explicitly set column widths of each sheet, keyed by column letter."""
    wb = load_workbook(file_path)
    try:
        widths = {}
        for ws in wb.worksheets:
            sheet_widths = {}
            for letter, dim in ws.column_dimensions.items():
                if dim.width is None:
                    continue
                # A <col> element may span several columns
                if dim.min and dim.max:
                    for idx in range(dim.min, dim.max + 1):
                        sheet_widths[get_column_letter(idx)] = dim.width
                else:
                    sheet_widths[letter] = dim.width
            widths[ws.title] = sheet_widths
        return widths
    finally:
        wb.close()
