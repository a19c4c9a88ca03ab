"""
Command-line interface for editorconfig-formatter.

This module provides CLI commands for checking, fixing, and inferring
editorconfig style settings across files and directories.
"""

import sys
import json
import click
import logging
from pathlib import Path
from typing import Dict, Optional
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.panel import Panel

from .. import __version__
from ..core.scanner import StyleScanner
from ..core.formatter import AutoFormatter
from ..core.settings import Settings, InvalidSettingError

# Initialize Rich console for output
console = Console()

logger = logging.getLogger(__name__)

SETTING_CHOICES = {
    'charset': ['latin1', 'utf-8', 'utf-8-bom', 'utf-16be', 'utf-16le', 'utf-32be', 'utf-32le'],
    'indent_style': ['tab', 'space'],
    'end_of_line': ['lf', 'crlf', 'cr'],
}


def settings_options(command):
    """Attach one option per editorconfig property, plus --config."""
    options = [
        click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
                     help='JSON file of editorconfig properties'),
        click.option('--charset', type=click.Choice(SETTING_CHOICES['charset']), help='Set to latin1, utf-8, ...'),
        click.option('--indent_style', '-i', type=click.Choice(SETTING_CHOICES['indent_style']),
                     help='Indentation style'),
        click.option('--indent_size', '-s', type=click.IntRange(min=1), help='Columns per indentation level'),
        click.option('--tab_width', '-t', type=click.IntRange(min=1), help='Columns per tab character'),
        click.option('--end_of_line', '-e', type=click.Choice(SETTING_CHOICES['end_of_line']),
                     help='Line ending marker'),
        click.option('--trim_trailing_whitespace/--no-trim_trailing_whitespace', '-w', default=None,
                     help='Remove whitespace before line endings'),
        click.option('--insert_final_newline/--no-insert_final_newline', '-n', default=None,
                     help='Require a newline at the end of the file'),
        click.option('--max_line_length', '-m', type=click.IntRange(min=1), help='Maximum line length'),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def build_settings(config_file: Optional[str], **properties) -> Settings:
    """Load settings from an optional JSON file, overridden by command-line values."""
    try:
        settings = Settings()
        if config_file:
            with open(config_file, 'r', encoding='utf-8') as f:
                settings = Settings.from_dict(json.load(f))
        overrides = {name: value for name, value in properties.items() if value is not None}
        return settings.merge(Settings.from_dict(overrides))
    except (InvalidSettingError, json.JSONDecodeError, AttributeError) as e:
        raise click.UsageError(f"Invalid configuration: {e}")


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose):
    """editorconfig-formatter - check, fix and infer editorconfig style settings."""
    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")


@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--recursive/--no-recursive', '-r', default=True, help='Scan directories recursively')
@click.option('--output', '-o', type=click.Path(), help='Output file for results (JSON format)')
@settings_options
def check(paths, recursive, output, config_file, **properties):
    """Check files against editorconfig settings."""
    settings = build_settings(config_file, **properties)
    scanner = StyleScanner()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        progress.add_task("Checking files...", total=None)
        results = scanner.scan_paths(paths, settings, recursive=recursive)

    summary = scanner.get_summary()
    display_check_results(results, summary)

    if output:
        save_results_to_file(results, summary, output)
        console.print(f"[green]Results saved to {output}[/green]")

    if any(result.status != "OK" for result in results):
        sys.exit(1)


@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--recursive/--no-recursive', '-r', default=True, help='Process directories recursively')
@click.option('--dest', '-d', type=click.Path(file_okay=False), help='Write fixed files into this directory')
@click.option('--dry-run', is_flag=True, help='Show what would be fixed without making changes')
@settings_options
def fix(paths, recursive, dest, dry_run, config_file, **properties):
    """Fix files to match editorconfig settings."""
    settings = build_settings(config_file, **properties)
    scanner = StyleScanner()
    formatter = AutoFormatter()

    if dry_run:
        console.print("[dim]Running in dry-run mode - no changes will be made[/dim]")

    failed = False
    for path in paths:
        files = scanner.collect_files(path, recursive)
        results = formatter.format_multiple_files(files, settings, dest=dest, base=path, dry_run=dry_run)
        failed = display_fix_results(results) or failed

    if failed:
        sys.exit(1)


@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--recursive/--no-recursive', '-r', default=True, help='Scan directories recursively')
@click.option('--ini', is_flag=True, help='Output an .editorconfig section instead of JSON')
@click.option('--root', is_flag=True, help='Mark the .editorconfig output as root')
def infer(paths, recursive, ini, root):
    """Infer editorconfig settings from existing files."""
    scanner = StyleScanner()
    aggregated = scanner.infer_paths(paths, recursive=recursive)

    if ini:
        click.echo(aggregated.to_ini(root=root), nl=False)
    else:
        click.echo(json.dumps(aggregated.to_dict(), indent=2))


def display_check_results(results, summary: Dict):
    """Display check results in a formatted table."""
    if not results:
        console.print("[yellow]No files found[/yellow]")
        return

    for result in results:
        if result.status == "Failed":
            console.print(f"[red]✗[/red] {result.filepath}: {result.error}")
            continue
        if not result.violations:
            continue

        table = Table(title=result.filepath, title_justify="left")
        table.add_column("Line", justify="right")
        table.add_column("Column", justify="right")
        table.add_column("Rule", style="cyan")
        table.add_column("Message")

        for violation in result.violations:
            table.add_row(
                str(violation.line_number or ""),
                str(violation.column_number or ""),
                violation.rule,
                violation.message
            )
        console.print(table)

    summary_text = f"""
Total Files: {summary['total_files']}
OK Files: {summary['ok_files']}
Files with Violations: {summary['error_files']}
Failed Files: {summary['failed_files']}
Total Violations: {summary['total_violations']}
Not auto-fixable: {summary['unfixable_violations']}
    """.strip()

    console.print(Panel(summary_text, title="Check Summary", border_style="blue"))


def display_fix_results(results) -> bool:
    """Display per-file fix results; return True if any file failed."""
    total_changes = 0
    failed = False

    for filepath, result in results.items():
        name = Path(filepath).name
        if not result.success:
            failed = True
            console.print(f"[red]✗[/red] {name}: {result.message}")
            continue

        total_changes += result.changes_made
        console.print(f"[green]✓[/green] {name}: {result.message}")
        for violation in result.remaining:
            console.print(f"    [yellow]{violation}[/yellow]")

    console.print(f"\n[bold]Fixed {total_changes} violations in {len(results)} files[/bold]")
    return failed


def save_results_to_file(results, summary: Dict, output_path: str):
    """Save check results to a JSON file."""
    report = {
        'summary': summary,
        'files': [
            {
                'filepath': result.filepath,
                'status': result.status,
                'error': result.error,
                'violations': [
                    {
                        'rule': v.rule,
                        'message': v.message,
                        'line': v.line_number,
                        'column': v.column_number
                    }
                    for v in result.violations
                ]
            }
            for result in results
        ]
    }

    with open(output_path, 'w') as f:
        json.dump(report, f, indent=2)


if __name__ == '__main__':
    main()
