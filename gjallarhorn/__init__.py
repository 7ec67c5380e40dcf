# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                         ᚷᛃᚨᛚᛚᚨᚱᚺᛟᚱᚾ • GJALLARHORN
#                    The Horn That Warns All Nine Realms
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   "Heimdall blows the Gjallarhorn so that it is heard in all the worlds."
#
#   This package reads Infrastructure-as-Code before it is applied and
#   sounds the horn for every misconfiguration it finds, pointing at the
#   exact file and line where the danger was written.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

"""
Gjallarhorn - Infrastructure-as-Code misconfiguration scanner.

Parses Terraform modules and CloudFormation/SAM templates into a typed,
provenance-tracked model and evaluates a registry of security rules against it.

Usage:
    from gjallarhorn.scanner import Scanner

    report = Scanner().scan_paths(["./infra"])
    for result in report.results:
        print(result.rule_id, result.range, result.message)
"""

__version__ = "0.4.0"

__all__ = ["__version__"]
