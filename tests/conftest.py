"""
Shared fixtures and helpers for the test suite.

Provides:
- Provider row and contact JSON factory helpers
- In-memory ContentResolver / AccountManager fakes that record every call
- Settings fixture isolated from the environment
"""

from typing import Any, Optional

import pytest

from contacts2android.android import contract as c
from contacts2android.android.contract import Kind
from contacts2android.android.resolver import (
    AccountManager,
    ContentProviderOperation,
    ContentProviderResult,
    ContentResolver,
    OperationType,
    Row,
)
from contacts2android.config import Settings
from contacts2android.exceptions import OperationApplicationError
from contacts2android.models import Account


# ─────────────────────────────────────────────────────────────────────────────
# Row factories
# ─────────────────────────────────────────────────────────────────────────────


def make_row(
    raw_id: int = 1,
    kind: Optional[Kind] = None,
    data_id: Optional[int] = None,
    contact_id: Optional[int] = None,
    version: int = 1,
    dirty: int = 0,
    deleted: int = 0,
    source_id: Optional[str] = None,
    **columns: Any,
) -> Row:
    """Create a raw-contact-entity row with sensible test defaults."""
    row: Row = {
        c.ID: str(raw_id),
        c.CONTACT_ID: str(contact_id if contact_id is not None else raw_id + 100),
        c.DATA_ID: str(data_id) if data_id is not None else None,
        c.MIMETYPE: kind.value if kind is not None else None,
        c.VERSION: str(version),
        c.DIRTY: str(dirty),
        c.DELETED: str(deleted),
        c.SOURCE_ID: source_id,
        c.SYNC1: None,
        c.SYNC2: None,
        c.SYNC3: None,
        c.SYNC4: None,
    }
    row.update(columns)
    return row


def make_name_row(
    raw_id: int = 1,
    display_name: str = "Dr. Ann Marie Lee Jr.",
    given: Optional[str] = "Ann",
    family: Optional[str] = "Lee",
    middle: Optional[str] = "Marie",
    prefix: Optional[str] = "Dr.",
    suffix: Optional[str] = "Jr.",
    data_id: int = 10,
) -> Row:
    return make_row(
        raw_id,
        Kind.NAME,
        data_id=data_id,
        **{
            c.NAME_DISPLAY_NAME: display_name,
            c.NAME_GIVEN_NAME: given,
            c.NAME_FAMILY_NAME: family,
            c.NAME_MIDDLE_NAME: middle,
            c.NAME_PREFIX: prefix,
            c.NAME_SUFFIX: suffix,
        },
    )


def make_phone_row(
    raw_id: int = 1,
    number: str = "+15550100",
    type_code: int = c.PhoneType.MOBILE,
    label: Optional[str] = None,
    data_id: int = 20,
) -> Row:
    return make_row(
        raw_id,
        Kind.PHONE,
        data_id=data_id,
        **{c.VALUE: number, c.TYPE: str(int(type_code)), c.LABEL: label},
    )


def make_event_row(
    raw_id: int = 1,
    date: str = "1990-01-15",
    type_code: int = c.EventType.BIRTHDAY,
    label: Optional[str] = None,
    data_id: int = 30,
) -> Row:
    return make_row(
        raw_id,
        Kind.EVENT,
        data_id=data_id,
        **{c.VALUE: date, c.TYPE: str(int(type_code)), c.LABEL: label},
    )


def make_contact_json(**overrides: Any) -> dict[str, Any]:
    """Create a W3C contact JSON object with sensible test defaults."""
    contact: dict[str, Any] = {
        "displayName": "Ann Lee",
        "name": {"givenName": "Ann", "familyName": "Lee"},
        "phoneNumbers": [
            {"type": "mobile", "value": "+15550100"},
            {"type": "work", "value": "+15550101"},
        ],
    }
    contact.update(overrides)
    return contact


def ops_of_type(operations: list[ContentProviderOperation], op_type: OperationType) -> list:
    return [op for op in operations if op.type == op_type]


def ops_for_kind(operations: list[ContentProviderOperation], kind: Kind) -> list:
    """Operations that touch data rows of ``kind`` (by values or selection args)."""
    return [
        op
        for op in operations
        if op.values.get(c.MIMETYPE) == kind.value or kind.value in (op.selection_args or [])
    ]


# ─────────────────────────────────────────────────────────────────────────────
# In-memory provider fakes
# ─────────────────────────────────────────────────────────────────────────────


class FakeContentResolver(ContentResolver):
    """Records every call; answers queries from a queue of canned row lists."""

    def __init__(self, query_results: Optional[list[list[Row]]] = None):
        self.query_results = list(query_results or [])
        self.queries: list[dict[str, Any]] = []
        self.deletes: list[dict[str, Any]] = []
        self.batches: list[tuple[str, list[ContentProviderOperation]]] = []
        self.delete_count = 1
        self.new_raw_id = 77
        self.fail_batch = False
        self.streams: dict[str, bytes] = {}

    def query(self, uri, projection, selection, selection_args, sort_order):
        self.queries.append(
            {
                "uri": uri,
                "projection": projection,
                "selection": selection,
                "selection_args": selection_args,
                "sort_order": sort_order,
            }
        )
        if self.query_results:
            return self.query_results.pop(0)
        return []

    def delete(self, uri, selection, selection_args):
        self.deletes.append({"uri": uri, "selection": selection, "selection_args": selection_args})
        return self.delete_count

    def apply_batch(self, authority, operations):
        self.batches.append((authority, operations))
        if self.fail_batch:
            raise OperationApplicationError("constraint failed", index=1)
        results = []
        for index, op in enumerate(operations):
            if op.type == OperationType.INSERT:
                row_id = self.new_raw_id if index == 0 else 1000 + index
                results.append(ContentProviderResult(uri=f"{op.uri.split('?')[0]}/{row_id}"))
            else:
                results.append(ContentProviderResult(count=1))
        return results

    def open_input_stream(self, uri):
        return self.streams[uri]


class FakeAccountManager(AccountManager):
    def __init__(self, accounts: Optional[list[Account]] = None):
        self.accounts = list(accounts or [])
        self.calls = 0

    def get_accounts(self):
        self.calls += 1
        return list(self.accounts)


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def resolver():
    return FakeContentResolver()


@pytest.fixture
def account_manager():
    return FakeAccountManager([Account(name="ann@example.com", type="com.google")])


@pytest.fixture
def settings(monkeypatch):
    for var in ("CONTACTS_ACCOUNT_TYPE", "CONTACTS_ACCOUNT_NAME", "ANDROID_SERIAL", "HOST_PACKAGE"):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None)
