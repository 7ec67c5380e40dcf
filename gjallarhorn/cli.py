# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                              ᛒᛁᚠᚱᛟᛊᛏ • BIFRÖST
#                     The Rainbow Bridge Between Realms
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   "Heimdall needs less sleep than a bird, sees a hundred leagues by night
#    as well as by day, and hears the grass grow."
#
#   The command line: `gjallarhorn scan` sounds the horn over a tree of
#   Terraform and CloudFormation files, `gjallarhorn rules` lists what the
#   watch looks for.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import json
import logging
import sys
from typing import List, Optional, Tuple

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gjallarhorn import __version__
from gjallarhorn.baseline import Baseline
from gjallarhorn.cli_utils import (
    ExitCode, SEVERITY_ORDER, configure_logging, exit_code_for,
    format_severity, print_banner, set_console_theme, truncate,
)
from gjallarhorn.config import load_config, parse_provider
from gjallarhorn.exceptions import GjallarhornError
from gjallarhorn.rules.definition import Severity
from gjallarhorn.rules.registry import RuleRegistry
from gjallarhorn.scanner import ScanReport, Scanner

logger = logging.getLogger(__name__)

SEVERITY_CHOICES = click.Choice([s.lower() for s in SEVERITY_ORDER], case_sensitive=False)
PROVIDER_CHOICES = click.Choice(['aws', 'openstack'], case_sensitive=False)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version and exit')
@click.pass_context
def cli(ctx, version):
    """
    📯 GJALLARHORN - Infrastructure-as-Code misconfiguration scanner

    \b
    Quick Start:
      gjallarhorn scan ./infra                 # Scan Terraform and CloudFormation
      gjallarhorn scan . --format json -o out.json
      gjallarhorn rules --provider aws         # List the built-in rules
    """
    if version:
        click.echo(f"gjallarhorn {__version__}")
        ctx.exit(0)
    elif ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ═══════════════════════════════════════════════════════════════════════════════
# scan
# ═══════════════════════════════════════════════════════════════════════════════

@cli.command()
@click.argument('paths', nargs=-1, type=click.Path(exists=True))
@click.option('--format', 'output_format', type=click.Choice(['table', 'json']), default='table',
              help='Output format')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the report to a file')
@click.option('--severity', type=SEVERITY_CHOICES, help='Only report findings of this severity or higher')
@click.option('--fail-on', type=SEVERITY_CHOICES, default='critical', show_default=True,
              help='Exit non-zero when findings of this severity or higher remain')
@click.option('--workers', type=click.IntRange(min=1), help='Rule evaluation threads (default: CPU count)')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), help='Evaluation timeout in seconds')
@click.option('--include-rule', multiple=True, help='Only run these rules (id or long id)')
@click.option('--exclude-rule', multiple=True, help='Skip these rules (id or long id)')
@click.option('--provider', multiple=True, type=PROVIDER_CHOICES, help='Only run rules for these providers')
@click.option('--exclude-path', multiple=True, help='Glob of files or directories to skip')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file (default: .gjallarhorn.yml in the working directory)')
@click.option('--ignore-file', type=click.Path(exists=True, dir_okay=False),
              help='Baseline of accepted findings (default: .gjallarhorn-ignore)')
@click.option('--write-baseline', type=click.Path(dir_okay=False),
              help='Accept every current finding by writing its hash to this file')
@click.option('--no-color', is_flag=True, help='Disable colored output (for CI/CD)')
@click.option('--verbose', '-v', is_flag=True, help='Log progress to stderr')
def scan(
    paths: Tuple[str, ...],
    output_format: str,
    output: Optional[str],
    severity: Optional[str],
    fail_on: str,
    workers: Optional[int],
    timeout: Optional[float],
    include_rule: Tuple[str, ...],
    exclude_rule: Tuple[str, ...],
    provider: Tuple[str, ...],
    exclude_path: Tuple[str, ...],
    config_path: Optional[str],
    ignore_file: Optional[str],
    write_baseline: Optional[str],
    no_color: bool,
    verbose: bool,
) -> None:
    """
    Scan Terraform and CloudFormation files for misconfigurations.

    PATHS are files or directories; the working directory when omitted.

    \b
    Example:
        gjallarhorn scan ./infra
        gjallarhorn scan ./infra --severity high --fail-on high
        gjallarhorn scan template.yaml --format json
    """
    configure_logging(verbose)
    console = set_console_theme(no_color=no_color)
    paths = paths or ('.',)

    try:
        config = load_config(config_path).merged(
            workers=workers,
            timeout=timeout,
            minimum_severity=Severity.parse(severity) if severity else None,
            include_rules=include_rule,
            exclude_rules=exclude_rule,
            providers=[parse_provider(p) for p in provider],
            exclude_paths=exclude_path,
            ignore_file=ignore_file,
        )
        report = Scanner(config).scan_paths(paths)
    except GjallarhornError as e:
        raise click.ClickException(str(e))

    if write_baseline:
        baseline = Baseline()
        for result in report.results:
            baseline.add_result(result)
        written = baseline.save(write_baseline)
        logger.info(f"Wrote {len(baseline.rules)} accepted finding(s) to {written}")

    if output_format == 'json':
        rendered = json.dumps(report.to_dict(), indent=2)
        if output:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(rendered)
            console.print(f"[green]✓[/green] Report written to {output}")
        else:
            click.echo(rendered)
    else:
        if output:
            with open(output, 'w', encoding='utf-8') as f:
                _display_report(Console(file=f, no_color=True, width=160), report, paths)
            console.print(f"[green]✓[/green] Report written to {output}")
        else:
            _display_report(console, report, paths)

    if write_baseline:
        click.echo(f"Baseline of {len(report.results)} finding(s) written to {write_baseline}", err=True)

    sys.exit(exit_code_for(report.severity_summary, Severity.parse(fail_on), report.cancelled))


def _display_report(console: Console, report: ScanReport, paths: Tuple[str, ...]) -> None:
    console.print()
    print_banner(console)
    console.print(f"[dim]Scanned: {', '.join(paths)}  •  {report.files_read} file(s)  •  "
                  f"{report.rules_evaluated} rule(s)  •  {report.duration_seconds:.2f}s[/dim]")
    console.print()

    if report.results:
        table = Table(box=box.ROUNDED, show_header=True, header_style="bold white")
        table.add_column("Severity", no_wrap=True)
        table.add_column("Rule", style="cyan", no_wrap=True)
        table.add_column("Location", style="dim", no_wrap=True)
        table.add_column("Message")
        for result in report.results:
            r = result.range
            lines = f"{r.start_line}" if r.start_line == r.end_line else f"{r.start_line}-{r.end_line}"
            table.add_row(
                format_severity(result.severity.value),
                result.rule_id,
                f"{truncate(r.filename, 50)}:{lines}",
                result.message,
            )
        console.print(table)
        console.print()

    if report.diagnostics:
        console.print(f"[yellow]⚠️  {len(report.diagnostics)} diagnostic(s):[/yellow]")
        for diagnostic in report.diagnostics[:20]:
            console.print(f"  {diagnostic}", markup=False, style="dim")
        if len(report.diagnostics) > 20:
            console.print(f"  [dim]... and {len(report.diagnostics) - 20} more[/dim]")
        console.print()

    summary = report.severity_summary
    counts = "  ".join(f"{format_severity(name)} {summary[name]}" for name in SEVERITY_ORDER)
    footer = f"{counts}\n[dim]{len(report.ignored)} ignored by baseline[/dim]"
    if report.cancelled:
        footer += "\n[yellow]Evaluation stopped early; results are partial[/yellow]"

    if not report.results:
        console.print(Panel(f"[bold green]✅ PASSED - No findings[/bold green]\n{footer}", border_style="green"))
    elif summary['CRITICAL'] or summary['HIGH']:
        console.print(Panel(f"[bold red]❌ {len(report.results)} finding(s)[/bold red]\n{footer}", border_style="red"))
    else:
        console.print(Panel(f"[bold yellow]⚠️ {len(report.results)} finding(s)[/bold yellow]\n{footer}", border_style="yellow"))


# ═══════════════════════════════════════════════════════════════════════════════
# rules
# ═══════════════════════════════════════════════════════════════════════════════

@cli.command('rules')
@click.option('--provider', multiple=True, type=PROVIDER_CHOICES, help='Only list rules for these providers')
@click.option('--severity', type=SEVERITY_CHOICES, help='Only list rules of this severity or higher')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json']), default='table',
              help='Output format')
@click.option('--no-color', is_flag=True, help='Disable colored output')
def list_rules(provider: Tuple[str, ...], severity: Optional[str], output_format: str, no_color: bool) -> None:
    """List the built-in rules."""
    console = set_console_theme(no_color=no_color)
    try:
        registry = RuleRegistry.builtin().filtered(
            providers=[parse_provider(p) for p in provider],
            minimum_severity=Severity.parse(severity) if severity else None,
        )
    except GjallarhornError as e:
        raise click.ClickException(str(e))

    definitions: List = [r.definition for r in registry]
    if output_format == 'json':
        click.echo(json.dumps([d.to_dict() for d in definitions], indent=2))
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold white")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Long ID", no_wrap=True)
    table.add_column("Formats", style="dim")
    table.add_column("Summary")
    for definition in definitions:
        table.add_row(
            definition.avd_id,
            format_severity(definition.severity.value),
            definition.long_id,
            ", ".join(definition.formats),
            definition.summary,
        )
    console.print(table)
    console.print(f"\n[dim]Total: {len(definitions)} rule(s)[/dim]")


def main() -> None:
    try:
        cli()
    except KeyboardInterrupt:
        sys.exit(ExitCode.ERROR)


if __name__ == '__main__':
    main()
