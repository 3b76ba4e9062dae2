"""Shared test fixtures."""

import json
import subprocess
import sys

import pytest

from connect_exporter.domain.models import ExportOptions


INSTANCE_ID = '11111111-2222-3333-4444-555555555555'

# ── Sample API responses ─────────────────────────────────────────────────

INSTANCES = [
    {
        'Id': INSTANCE_ID,
        'Arn': f'arn:aws:connect:eu-west-1:123456789012:instance/{INSTANCE_ID}',
        'IdentityManagementType': 'CONNECT_MANAGED',
        'InstanceAlias': 'acme-prod',
        'InstanceStatus': 'ACTIVE',
        'InboundCallsEnabled': True,
        'OutboundCallsEnabled': False,
    },
    {
        'Id': '99999999-0000-0000-0000-000000000000',
        'InstanceAlias': 'acme-test',
        'InstanceStatus': 'ACTIVE',
    },
]

PROMPTS = [
    {'Id': 'pr-2', 'Name': 'Welcome', 'LastModifiedTime': '2024-05-01T10:00:00Z'},
    {'Id': 'pr-1', 'Name': 'Goodbye', 'LastModifiedRegion': 'eu-west-1'},
]

HOURS = [
    {'Id': 'h-z', 'Name': 'Z-Hours', 'LastModifiedTime': '2024-05-01T10:00:00Z'},
    {'Id': 'h-a', 'Name': 'A-Hours', 'LastModifiedTime': '2024-05-01T10:00:00Z'},
    {'Id': 'h-m', 'Name': 'M-Hours', 'LastModifiedRegion': 'eu-west-1'},
]

QUEUES = [
    {'Id': 'q-1', 'Name': 'Support', 'QueueType': 'STANDARD'},
    {'Id': 'q-2', 'Name': 'Billing', 'QueueType': 'STANDARD'},
]

ROUTINGS = [
    {'Id': 'rp-1', 'Name': 'Basic Routing Profile'},
]

MODULES = [
    {'Id': 'm-1', 'Name': 'Shared Menu', 'State': 'ACTIVE'},
]

FLOWS = [
    {'Id': 'f-2', 'Name': 'Main Flow', 'ContactFlowType': 'CONTACT_FLOW'},
    {'Id': 'f-1', 'Name': 'Café Flow', 'ContactFlowType': 'CONTACT_FLOW'},
    {'Id': 'f-3', 'Name': 'Default agent hold', 'ContactFlowType': 'AGENT_HOLD'},
]

QUICK_CONNECTS = [
    {'Id': 'qc-1', 'Name': 'Transfer to Billing', 'QuickConnectType': 'QUEUE'},
]

PHONE_NUMBERS = [
    {'Id': 'pn-2', 'PhoneNumber': '+33100000002', 'PhoneNumberType': 'DID'},
    {'Id': 'pn-1', 'PhoneNumber': '+33100000001', 'PhoneNumberType': 'TOLL_FREE'},
]

FLOW_CONTENT = '{"Version":"2019-10-30","StartAction":"a1","Actions":[]}'


def _detail(entry, **extra):
    return {**entry, 'LastModifiedTime': '2024-05-01T10:00:00Z', **extra}


DETAILS = {
    ('describe-hours-of-operation', 'h-z'): {'HoursOfOperation': _detail(HOURS[0], TimeZone='UTC')},
    ('describe-hours-of-operation', 'h-a'): {'HoursOfOperation': _detail(HOURS[1], TimeZone='UTC')},
    ('describe-hours-of-operation', 'h-m'): {'HoursOfOperation': _detail(HOURS[2], TimeZone='UTC')},
    ('describe-queue', 'q-1'): {'Queue': _detail(QUEUES[0], Status='ENABLED')},
    ('describe-queue', 'q-2'): {'Queue': _detail(QUEUES[1], Status='ENABLED')},
    ('describe-routing-profile', 'rp-1'): {'RoutingProfile': _detail(
        ROUTINGS[0], IsDefault=True, NumberOfAssociatedQueues=2, NumberOfAssociatedUsers=5,
        DefaultOutboundQueueId='q-1',
    )},
    ('list-routing-profile-queues', 'rp-1'): {'RoutingProfileQueueConfigSummaryList': [
        {'QueueId': 'q-1', 'QueueName': 'Support', 'Priority': 1, 'Delay': 0,
         'LastModifiedTime': '2024-05-01T10:00:00Z'},
    ]},
    ('describe-contact-flow-module', 'm-1'): {'ContactFlowModule': _detail(
        MODULES[0], Status='published', Description='Shared menu', Content=FLOW_CONTENT,
    )},
    ('describe-contact-flow', 'f-1'): {'ContactFlow': _detail(
        FLOWS[1], Status='saved', Description='Not ready', Content=FLOW_CONTENT,
    )},
    ('describe-contact-flow', 'f-2'): {'ContactFlow': _detail(
        FLOWS[0], Status='published', Description='Entry point', Content=FLOW_CONTENT,
    )},
    ('describe-contact-flow', 'f-3'): {'ContactFlow': _detail(
        FLOWS[2], Status='PUBLISHED', Description='', Content=FLOW_CONTENT,
    )},
    ('describe-quick-connect', 'qc-1'): {'QuickConnect': _detail(QUICK_CONNECTS[0])},
}

LISTS = {
    'list-instances': {'InstanceSummaryList': INSTANCES},
    'list-prompts': {'PromptSummaryList': PROMPTS},
    'list-hours-of-operations': {'HoursOfOperationSummaryList': HOURS},
    'list-queues': {'QueueSummaryList': QUEUES},
    'list-routing-profiles': {'RoutingProfileSummaryList': ROUTINGS},
    'list-contact-flow-modules': {'ContactFlowModulesSummaryList': MODULES},
    'list-contact-flows': {'ContactFlowSummaryList': FLOWS},
    'list-quick-connects': {'QuickConnectSummaryList': QUICK_CONNECTS},
    'list-phone-numbers': {'PhoneNumberSummaryList': PHONE_NUMBERS},
}


class FakeConnect:
    """In-memory stand-in for the CLI, with the ``subprocess.run`` signature."""

    def __init__(self):
        self.lists = json.loads(json.dumps(LISTS))
        self.details = json.loads(json.dumps({f'{k[0]} {k[1]}': v for k, v in DETAILS.items()}))
        self.failing: set[str] = set()
        self.empty: set[str] = set()
        self.stderr: dict[str, str] = {}
        self.calls: list[list[str]] = []

    def __call__(self, args, capture_output=False, check=False):
        self.calls.append(list(args))
        operation = args[2]
        entry_id = self._entry_id(args)
        key = f'{operation} {entry_id}' if entry_id else operation
        stderr = self.stderr.get(key, '').encode('utf-8')

        if key in self.failing or operation in self.failing:
            return subprocess.CompletedProcess(args, 254, b'', stderr or b'An error occurred')
        if key in self.empty:
            return subprocess.CompletedProcess(args, 0, b'', stderr)
        if entry_id is not None:
            payload = self.details.get(key)
        else:
            payload = self.lists.get(operation)
        if payload is None:
            return subprocess.CompletedProcess(args, 254, b'', b'ResourceNotFoundException')
        return subprocess.CompletedProcess(args, 0, json.dumps(payload).encode('utf-8'), stderr)

    @staticmethod
    def _entry_id(args):
        for i, arg in enumerate(args):
            if arg.endswith('-id') and arg != '--instance-id':
                return args[i + 1]
        return None


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def fake_connect():
    return FakeConnect()


@pytest.fixture
def options():
    return ExportOptions(codepage='utf-8')


@pytest.fixture
def read_catalog():
    """Read a JSON Lines catalog file into a list of entries."""
    def _read(path) -> list[dict]:
        with open(path, encoding='utf-8') as f:
            return [json.loads(line) for line in f if line.strip()]
    return _read


@pytest.fixture(autouse=True)
def utf8_file_system(monkeypatch):
    """Pin the file system encoding the charset self-test compares against."""
    monkeypatch.setattr(sys, 'getfilesystemencoding', lambda: 'utf-8')
