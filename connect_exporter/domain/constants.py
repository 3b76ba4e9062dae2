"""Component-type table and shared constants.

Centralizes the remote operation names, response keys, output file names and
volatile fields for every exported component type.
"""

from dataclasses import dataclass

# ── Remote API ───────────────────────────────────────────────────────────

SERVICE = 'connect'

# Upper bound accepted by the list-* operations; large enough that a single
# call returns the whole collection.
MAX_RESULTS = 1000

# Lower ceilings for operations that reject MAX_RESULTS.
LIST_PAGE_LIMITS: dict[str, int] = {
    'list-instances': 10,
    'list-routing-profile-queues': 100,
}

API_OUTPUT_ENCODING = 'utf-8'

# ── Volatile fields ──────────────────────────────────────────────────────

VOLATILE_FIELDS = frozenset({'LastModifiedTime', 'LastModifiedRegion'})

ROUTING_VOLATILE_FIELDS = VOLATILE_FIELDS | {
    'IsDefault',
    'NumberOfAssociatedQueues',
    'NumberOfAssociatedUsers',
}

# ── Name filters ─────────────────────────────────────────────────────────

# Built-in flows and modules are always exported, regardless of the
# include prefix.
DEFAULT_NAME_PREFIX = 'Default '

PUBLISHED_STATUS = 'published'

# Self-test character for the name encoder.
CHARSET_PROBE = 'é'


@dataclass(frozen=True)
class ComponentType:
    """Static description of one exported component type."""

    key: str
    label: str
    catalog_file: str
    list_operation: str
    list_key: str
    list_args: tuple[str, ...] = ()
    describe_operation: str | None = None
    describe_id_arg: str | None = None
    describe_key: str | None = None
    detail_prefix: str | None = None
    volatile_fields: frozenset[str] = VOLATILE_FIELDS
    content_bearing: bool = False
    name_keyed: bool = True
    prefix_filtered: bool = False
    queue_list_prefix: str | None = None
    queue_list_operation: str | None = None
    queue_list_key: str | None = None

    @property
    def has_detail(self) -> bool:
        return self.describe_operation is not None


PROMPTS = ComponentType(
    key='prompts',
    label='Prompts',
    catalog_file='prompts.json',
    list_operation='list-prompts',
    list_key='PromptSummaryList',
)

HOURS = ComponentType(
    key='hours',
    label='Hours of operation',
    catalog_file='hours.json',
    list_operation='list-hours-of-operations',
    list_key='HoursOfOperationSummaryList',
    describe_operation='describe-hours-of-operation',
    describe_id_arg='--hours-of-operation-id',
    describe_key='HoursOfOperation',
    detail_prefix='hour',
)

QUEUES = ComponentType(
    key='queues',
    label='Queues',
    catalog_file='queues.json',
    list_operation='list-queues',
    list_key='QueueSummaryList',
    list_args=('--queue-types', 'STANDARD'),
    describe_operation='describe-queue',
    describe_id_arg='--queue-id',
    describe_key='Queue',
    detail_prefix='queue',
)

ROUTINGS = ComponentType(
    key='routings',
    label='Routing profiles',
    catalog_file='routings.json',
    list_operation='list-routing-profiles',
    list_key='RoutingProfileSummaryList',
    describe_operation='describe-routing-profile',
    describe_id_arg='--routing-profile-id',
    describe_key='RoutingProfile',
    detail_prefix='routing',
    volatile_fields=ROUTING_VOLATILE_FIELDS,
    queue_list_prefix='routingQs',
    queue_list_operation='list-routing-profile-queues',
    queue_list_key='RoutingProfileQueueConfigSummaryList',
)

MODULES = ComponentType(
    key='modules',
    label='Contact flow modules',
    catalog_file='modules.json',
    list_operation='list-contact-flow-modules',
    list_key='ContactFlowModulesSummaryList',
    describe_operation='describe-contact-flow-module',
    describe_id_arg='--contact-flow-module-id',
    describe_key='ContactFlowModule',
    detail_prefix='module',
    content_bearing=True,
    prefix_filtered=True,
)

FLOWS = ComponentType(
    key='flows',
    label='Contact flows',
    catalog_file='flows.json',
    list_operation='list-contact-flows',
    list_key='ContactFlowSummaryList',
    describe_operation='describe-contact-flow',
    describe_id_arg='--contact-flow-id',
    describe_key='ContactFlow',
    detail_prefix='flow',
    content_bearing=True,
    prefix_filtered=True,
)

QUICK_CONNECTS = ComponentType(
    key='quickconnects',
    label='Quick connects',
    catalog_file='quickconnects.json',
    list_operation='list-quick-connects',
    list_key='QuickConnectSummaryList',
    describe_operation='describe-quick-connect',
    describe_id_arg='--quick-connect-id',
    describe_key='QuickConnect',
    detail_prefix='quickconnect',
)

PHONE_NUMBERS = ComponentType(
    key='phonenumbers',
    label='Phone numbers',
    catalog_file='phonenumbers.json',
    list_operation='list-phone-numbers',
    list_key='PhoneNumberSummaryList',
    name_keyed=False,
)

# Export order. Modules precede flows because flows reference them.
COMPONENT_TYPES: tuple[ComponentType, ...] = (
    PROMPTS,
    HOURS,
    QUEUES,
    ROUTINGS,
    MODULES,
    FLOWS,
    QUICK_CONNECTS,
    PHONE_NUMBERS,
)

COMPONENTS_BY_KEY: dict[str, ComponentType] = {c.key: c for c in COMPONENT_TYPES}

# ── Instance record ──────────────────────────────────────────────────────

INSTANCE_FILE = 'instance.json'
INSTANCE_VAR_FILE = 'instance.var'
