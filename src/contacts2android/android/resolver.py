"""Content resolver and account manager contracts.

The Android provider is an external collaborator. Everything in the bridge
talks to it through :class:`ContentResolver`, which mirrors the subset of
``android.content.ContentResolver`` the contacts code needs.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel, Field

from contacts2android.android.contract import CALLER_IS_SYNCADAPTER
from contacts2android.models import Account

Row = dict[str, Any]


class OperationType(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class ContentProviderOperation(BaseModel):
    """One step of a batch applied with :meth:`ContentResolver.apply_batch`."""

    type: OperationType
    uri: str
    values: dict[str, Any] = Field(default_factory=dict)
    selection: str | None = None
    selection_args: list[str] | None = None
    # column -> index of an earlier operation whose result id fills the column
    value_back_references: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def new_insert(cls, uri: str, values: dict[str, Any] | None = None) -> "ContentProviderOperation":
        return cls(type=OperationType.INSERT, uri=uri, values=values or {})

    @classmethod
    def new_update(
        cls,
        uri: str,
        selection: str,
        selection_args: list[str],
        values: dict[str, Any] | None = None,
    ) -> "ContentProviderOperation":
        return cls(
            type=OperationType.UPDATE,
            uri=uri,
            values=values or {},
            selection=selection,
            selection_args=selection_args,
        )

    @classmethod
    def new_delete(cls, uri: str, selection: str, selection_args: list[str]) -> "ContentProviderOperation":
        return cls(
            type=OperationType.DELETE,
            uri=uri,
            selection=selection,
            selection_args=selection_args,
        )

    def with_back_reference(self, column: str, index: int) -> "ContentProviderOperation":
        self.value_back_references[column] = index
        return self


class ContentProviderResult(BaseModel):
    """Outcome of one applied operation: an inserted row's URI or an affected-row count."""

    uri: str | None = None
    count: int | None = None

    @property
    def last_path_segment(self) -> str | None:
        if not self.uri:
            return None
        path = urlsplit(self.uri).path.rstrip("/")
        return path.rsplit("/", 1)[-1] or None


def append_query_parameter(uri: str, key: str, value: str) -> str:
    """Return ``uri`` with ``key=value`` added to its query string."""
    parts = urlsplit(uri)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(query)))


def as_sync_adapter(uri: str) -> str:
    """Mark a provider URI as coming from a sync adapter."""
    return append_query_parameter(uri, CALLER_IS_SYNCADAPTER, "true")


def strip_query(uri: str) -> str:
    """Drop the query string from a provider URI."""
    return urlunsplit(urlsplit(uri)._replace(query=""))


class ContentResolver(ABC):
    """Port for reading and writing content provider rows."""

    @abstractmethod
    def query(
        self,
        uri: str,
        projection: list[str] | None,
        selection: str | None,
        selection_args: list[str] | None,
        sort_order: str | None,
    ) -> list[Row]:
        """Run a query and return the rows as column -> value dicts."""

    @abstractmethod
    def delete(self, uri: str, selection: str | None, selection_args: list[str] | None) -> int:
        """Delete matching rows and return how many were affected."""

    @abstractmethod
    def apply_batch(
        self, authority: str, operations: list[ContentProviderOperation]
    ) -> list[ContentProviderResult]:
        """Apply a batch of operations, returning one result per operation.

        Raises:
            ProviderError: the provider could not be reached
            OperationApplicationError: an operation in the batch failed
        """

    @abstractmethod
    def open_input_stream(self, uri: str) -> bytes:
        """Read the full content behind a ``content:`` URI."""


class AccountManager(ABC):
    """Port for listing the accounts registered on the device."""

    @abstractmethod
    def get_accounts(self) -> list[Account]:
        pass
