# ᛁᚨᛗ • Wildcards in inline SAM policies
from typing import Iterable

from gjallarhorn.providers.aws.iam import Policy
from gjallarhorn.rules.result import Results


def report_wildcards(policies: Iterable[Policy], results: Results) -> None:
    """Add one result per wildcard action and per wildcard resource of an Allow statement."""
    for policy in policies:
        for action in policy.wildcard_actions():
            results.add(f"Policy document uses a wildcard action '{action.value}'.", action)
        for resource in policy.wildcard_resources():
            results.add("Policy document uses a wildcard resource for allowed action(s).", resource)
