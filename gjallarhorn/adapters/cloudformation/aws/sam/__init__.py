# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                   ᛊᚨᛗ • CLOUDFORMATION -> AWS SERVERLESS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from gjallarhorn.adapters.cloudformation.aws.sam.apis import get_apis, get_http_apis
from gjallarhorn.adapters.cloudformation.aws.sam.applications import get_applications
from gjallarhorn.adapters.cloudformation.aws.sam.functions import get_functions
from gjallarhorn.adapters.cloudformation.aws.sam.state_machines import get_state_machines
from gjallarhorn.adapters.cloudformation.aws.sam.tables import get_simple_tables
from gjallarhorn.parsers.block import Module
from gjallarhorn.providers.aws.sam import SAM


def adapt(template: Module) -> SAM:
    return SAM(
        apis=get_apis(template),
        http_apis=get_http_apis(template),
        functions=get_functions(template),
        state_machines=get_state_machines(template),
        simple_tables=get_simple_tables(template),
        applications=get_applications(template),
    )
