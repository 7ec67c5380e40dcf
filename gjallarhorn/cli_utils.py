# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                            ᚱᚢᚾᛁᚱ • THE RUNES
#                  Shared Symbols of the Command Line
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   Exit codes, severity colours, the console and small formatting helpers
#   used by every command.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from gjallarhorn.rules.definition import Severity

# ᛏᛁᚹᚨᛉ • Tiwaz - Exit Codes for CI/CD Integration
class ExitCode:
    """
    Standardized exit codes for CI/CD integration.

    Usage:
        sys.exit(ExitCode.CRITICAL_FINDINGS)

    CI/CD Example:
        gjallarhorn scan ./infra --fail-on high
        if [ $? -eq 2 ]; then echo "Critical findings!"; fi
    """
    SUCCESS = 0              # No findings at or above --fail-on
    ERROR = 1                # Invalid arguments or configuration
    CRITICAL_FINDINGS = 2
    HIGH_FINDINGS = 3
    MEDIUM_FINDINGS = 4
    LOW_FINDINGS = 5
    TIMEOUT = 11             # Evaluation timed out before every rule ran


FINDINGS_EXIT_CODES: Dict[Severity, int] = {
    Severity.CRITICAL: ExitCode.CRITICAL_FINDINGS,
    Severity.HIGH: ExitCode.HIGH_FINDINGS,
    Severity.MEDIUM: ExitCode.MEDIUM_FINDINGS,
    Severity.LOW: ExitCode.LOW_FINDINGS,
}

# Severity levels in order of criticality
SEVERITY_ORDER = tuple(s.value for s in sorted(Severity, key=lambda s: -s.rank))

SEVERITY_COLORS: Dict[str, str] = {
    'CRITICAL': 'red',
    'HIGH': 'orange1',
    'MEDIUM': 'yellow',
    'LOW': 'blue',
}

SEVERITY_EMOJI: Dict[str, str] = {
    'CRITICAL': '🔴',
    'HIGH': '🟠',
    'MEDIUM': '🟡',
    'LOW': '🟢',
}

# ═══════════════════════════════════════════════════════════════════════════════
# Console Configuration
# ═══════════════════════════════════════════════════════════════════════════════
console = Console()


def set_console_theme(*, no_color: bool = False) -> Console:
    """Replace the shared console; returns it for callers holding their own reference."""
    global console
    console = Console(no_color=no_color, highlight=not no_color)
    return console


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr when -v is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("gjallarhorn").setLevel(logging.DEBUG)


# ═══════════════════════════════════════════════════════════════════════════════
# Helper Functions
# ═══════════════════════════════════════════════════════════════════════════════
def truncate(text: str, max_length: int, suffix: str = '..') -> str:
    text = str(text) if text else ''
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def get_severity_color(severity: str) -> str:
    return SEVERITY_COLORS.get(severity.upper(), 'white')


def format_severity(severity: str, *, with_emoji: bool = False) -> str:
    """Severity level with Rich markup for coloured display."""
    color = get_severity_color(severity)
    prefix = f"{SEVERITY_EMOJI.get(severity.upper(), '⚫')} " if with_emoji else ""
    return f"{prefix}[{color}]{severity.upper()}[/{color}]"


def exit_code_for(summary: Dict[str, int], fail_on: Optional[Severity], cancelled: bool = False) -> int:
    """
    Exit code for a finished scan.

    A cancelled evaluation exits with TIMEOUT. Otherwise the most severe
    level at or above fail_on that has findings picks the code.
    """
    if cancelled:
        return ExitCode.TIMEOUT
    if fail_on is None:
        return ExitCode.SUCCESS
    for name in SEVERITY_ORDER:
        severity = Severity(name)
        if severity.at_least(fail_on) and summary.get(name, 0) > 0:
            return FINDINGS_EXIT_CODES[severity]
    return ExitCode.SUCCESS


# ᚨᛊᚲᛁᛁ • Banner
GJALLARHORN_BANNER_SMALL = "[bold cyan]📯 GJALLARHORN[/bold cyan] [dim]• The Horn of the Watch[/dim]"


def print_banner(target: Optional[Console] = None) -> None:
    (target or console).print(GJALLARHORN_BANNER_SMALL)
