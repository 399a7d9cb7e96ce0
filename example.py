#!/usr/bin/env python3
"""
Example usage of the csvtoxls library.
"""

import logging
import tempfile
from pathlib import Path

from csvtoxls import CsvConverter, CsvConverterConfig, SheetNameRegistry
from csvtoxls.readback import read_column_widths, read_workbook


def main():
    """Demonstrate the three conversion modes."""
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir) / 'sales'
        (root / 'north').mkdir(parents=True)
        (root / 'south').mkdir(parents=True)
        (root / 'north' / 'data.csv').write_text('region;total\nNorth;"1200"\n', encoding='utf-8')
        (root / 'south' / 'data.csv').write_text('region;total\nSouth;950\n', encoding='utf-8')

        converter = CsvConverter(CsvConverterConfig(encoding='utf-8-sig'))

        # Example 1: Single file
        print("=== Example 1: Single File ===")
        xlsx_path = converter.convert_file(root / 'north' / 'data.csv')
        print(read_workbook(xlsx_path)['data'])
        print()

        # Example 2: One workbook per CSV
        print("=== Example 2: Directory, One Workbook Per File ===")
        summary = converter.convert_directory(root)
        print(f"Summary: {summary.succeeded} files successfully converted, {summary.failed} failed")
        print()

        # Example 3: One workbook, one sheet per CSV
        print("=== Example 3: Directory Merged Into One Workbook ===")
        summary = converter.merge_directory(root)
        merged = summary.outputs[0]
        for sheet_name, df in read_workbook(merged).items():
            print(f"Sheet '{sheet_name}':")
            print(df)
        print(f"Column widths: {read_column_widths(merged)}")
        print()

    # Example 4: Sheet names
    print("=== Example 4: Sheet Names ===")
    registry = SheetNameRegistry()
    for name in ['data', 'data', 'Q1 [draft]', 'a' * 40, 'a' * 40]:
        print(f"{name!r} -> {registry.derive(name)!r}")


if __name__ == "__main__":
    main()
