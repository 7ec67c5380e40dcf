# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                           ᛒᛁᚠᚱᛟᛊᛏ • BIFROST
#             The Bridge from Parsed Documents to the Typed State
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   adapt(modules=..., templates=...) runs every provider adapter once per
#   document set and merges the partial states. Terraform modules are
#   adapted together (resources may reference across files of a module);
#   each CloudFormation template is adapted on its own.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from gjallarhorn.adapters import cloudformation, terraform
from gjallarhorn.adapters.common import collect_diagnostics
from gjallarhorn.diagnostics import Diagnostic
from gjallarhorn.parsers.block import Module, Modules
from gjallarhorn.state import State, merge

logger = logging.getLogger(__name__)


def adapt(
    modules: Optional[Modules] = None,
    templates: Iterable[Module] = (),
) -> Tuple[State, List[Diagnostic]]:
    """Build the scan state from Terraform modules and CloudFormation templates."""
    partial: List[State] = []
    with collect_diagnostics() as diagnostics:
        if modules:
            partial.append(terraform.adapt(modules))
        for template in templates:
            logger.debug(f"Adapting template {template.path}")
            partial.append(cloudformation.adapt(template))

    state = merge(partial)
    logger.info(f"Adapted state: {state.counts() or 'no supported resources'}")
    return state, diagnostics
