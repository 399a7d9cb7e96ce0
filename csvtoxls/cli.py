"""
Command-line interface for the csvtoxls converter.
"""

import logging
from pathlib import Path

import click

from .converter import CsvConverter, CsvConverterConfig
from .errors import CsvToXlsError


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('-f', 'file_path', default='', help='Path to a single CSV file to convert')
@click.option('-d', 'dir_path', default='', help='Path to a directory containing CSV files to convert')
@click.option('-s', 'single_workbook', is_flag=True,
              help='In directory mode, create a single Excel file with multiple sheets instead of separate files')
@click.option('-v', '--verbose', is_flag=True, help='Show debug output')
@click.pass_context
def main(ctx, file_path, dir_path, single_workbook, verbose):
    """
    Convert semicolon-separated CSV files to XLSX workbooks.

    Examples:

        # Convert a single file
        csvtoxls -f data.csv

        # Convert all CSVs to separate files
        csvtoxls -d ./data

        # Convert all CSVs to a single Excel file
        csvtoxls -d ./data -s

    Notes:

    \b
      - The separator is semicolon (;)
      - Quotes are removed from values
      - Column widths are automatically adjusted to fit content
      - Existing files will be overwritten without warning
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(message)s',
        force=True,
    )

    # Empty values count as not given
    if not file_path and not dir_path:
        click.echo('Error: You must specify either -f (file) or -d (directory)')
        click.echo(ctx.get_help())
        ctx.exit(1)

    if file_path and dir_path:
        click.echo('Error: Specify either -f or -d, not both')
        ctx.exit(1)

    converter = CsvConverter(CsvConverterConfig())

    if file_path:
        try:
            converter.convert_file(Path(file_path))
        except (CsvToXlsError, OSError) as e:
            click.echo(f"Error during file conversion: {e}", err=True)
            ctx.exit(1)
        return

    try:
        if single_workbook:
            summary = converter.merge_directory(Path(dir_path))
            if summary.found == 0:
                click.echo('No CSV files found in the directory')
            else:
                click.echo(f"\nExcel file created: {summary.outputs[0]}")
                click.echo(f"Summary: {summary.succeeded} sheets successfully created, {summary.failed} failed")
        else:
            summary = converter.convert_directory(Path(dir_path))
            click.echo(f"\nSummary: {summary.succeeded} files successfully converted, {summary.failed} failed")
            if summary.found == 0:
                click.echo('No CSV files found in the directory')
    except (CsvToXlsError, OSError) as e:
        click.echo(f"Error during directory conversion: {e}", err=True)
        ctx.exit(1)


if __name__ == '__main__':
    main()
