"""Content resolver and account manager backed by ``adb shell content``.

The ``content`` tool on the device prints query results as one line per row::

    Row: 0 _id=12, contact_id=7, mimetype=vnd.android.cursor.item/name, data1=Ann Lee

Inserts report nothing back, so the id of an inserted row is recovered by
reading the newest ``_id`` of the table it went into. Batches run one
command per operation and are not atomic.
"""

import logging
import re
import shlex
import subprocess
from typing import Any

from contacts2android.android import contract as c
from contacts2android.android.resolver import (
    AccountManager,
    ContentProviderOperation,
    ContentProviderResult,
    ContentResolver,
    OperationType,
    Row,
    strip_query,
)
from contacts2android.config import Settings
from contacts2android.exceptions import AdbError, OperationApplicationError, ProviderError
from contacts2android.models import Account

logger = logging.getLogger(__name__)

NULL = "NULL"
BLOB = "BLOB"
NO_RESULT = "No result found."

_ROW_PREFIX = re.compile(r"^Row: \d+ ?")
_ACCOUNT_PATTERN = re.compile(r"Account \{name=(?P<name>.+?), type=(?P<type>[^}]+?)\}")


def quote_literal(value: Any) -> str:
    """Render ``value`` as an SQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


def bind_selection(selection: str | None, selection_args: list[str] | None) -> str | None:
    """Inline positional ``?`` arguments into ``selection`` as quoted literals."""
    if selection is None:
        return None
    args = selection_args or []
    parts = selection.split("?")
    if len(parts) - 1 != len(args):
        raise ProviderError(
            f"Selection has {len(parts) - 1} placeholders but {len(args)} arguments: {selection}"
        )
    bound = parts[0]
    for arg, part in zip(args, parts[1:]):
        bound += quote_literal(arg) + part
    return bound


def bind_value(column: str, value: Any) -> str:
    """Format one ``--bind`` argument for ``content insert``/``update``."""
    if value is None:
        return f"{column}:n:"
    if isinstance(value, bool):
        return f"{column}:b:{'true' if value else 'false'}"
    if isinstance(value, int):
        kind = "i" if -(2**31) <= value < 2**31 else "l"
        return f"{column}:{kind}:{value}"
    if isinstance(value, float):
        return f"{column}:d:{value}"
    if isinstance(value, (bytes, bytearray)):
        raise ProviderError(f"Cannot bind binary value for {column} over adb")
    return f"{column}:s:{value}"


def parse_rows(output: str, projection: list[str] | None = None) -> list[Row]:
    """Parse ``content query`` output into column -> value dicts.

    With a projection, columns are split on the known names so values that
    contain ``", "`` survive intact.
    """
    if projection:
        names = "|".join(re.escape(name) for name in sorted(projection, key=len, reverse=True))
        separator = re.compile(rf", (?=(?:{names})=)")
    else:
        separator = re.compile(r", (?=\w+=)")

    rows: list[Row] = []
    for line in output.splitlines():
        match = _ROW_PREFIX.match(line)
        if not match:
            continue
        row: Row = {}
        body = line[match.end():]
        if not body:
            rows.append(row)
            continue
        for pair in separator.split(body):
            column, _, value = pair.partition("=")
            if value == NULL or (column == c.PHOTO and value == BLOB):
                row[column] = None
            else:
                row[column] = value
        rows.append(row)
    return rows


class AdbClient:
    """Runs adb commands against one device."""

    def __init__(self, adb_path: str = "adb", serial: str | None = None, timeout: float = 30.0):
        self.adb_path = adb_path
        self.serial = serial
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdbClient":
        return cls(settings.adb_path, settings.device_serial, settings.adb_timeout)

    def _base(self) -> list[str]:
        command = [self.adb_path]
        if self.serial:
            command += ["-s", self.serial]
        return command

    def _run(self, command: list[str]) -> bytes:
        logger.debug(f"Running: {' '.join(command)}")
        try:
            result = subprocess.run(command, capture_output=True, timeout=self.timeout, check=False)
        except FileNotFoundError as e:
            raise AdbError(command, None, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise AdbError(command, None, f"timed out after {self.timeout}s") from e

        stderr = result.stderr.decode("utf-8", errors="replace")
        if result.returncode != 0:
            raise AdbError(command, result.returncode, stderr)
        return result.stdout

    def shell(self, *args: str) -> str:
        """Run a device shell command; arguments are quoted for the device shell."""
        command = self._base() + ["shell", " ".join(shlex.quote(arg) for arg in args)]
        output = self._run(command).decode("utf-8", errors="replace")
        # The content tool reports provider failures on stdout with exit code 0
        if output.startswith(("Error", "java.lang.")):
            raise AdbError(command, 0, output)
        return output

    def exec_out(self, *args: str) -> bytes:
        """Run a device command and return its raw stdout."""
        command = self._base() + ["exec-out", " ".join(shlex.quote(arg) for arg in args)]
        return self._run(command)


class AdbContentResolver(ContentResolver):
    """:class:`ContentResolver` that drives the device's ``content`` command over adb."""

    def __init__(self, client: AdbClient):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdbContentResolver":
        return cls(AdbClient.from_settings(settings))

    def query(
        self,
        uri: str,
        projection: list[str] | None,
        selection: str | None,
        selection_args: list[str] | None,
        sort_order: str | None,
    ) -> list[Row]:
        args = ["content", "query", "--uri", uri]
        if projection:
            args += ["--projection", ":".join(projection)]
        where = bind_selection(selection, selection_args)
        if where:
            args += ["--where", where]
        if sort_order:
            args += ["--sort", sort_order]

        output = self.client.shell(*args)
        if output.strip() == NO_RESULT:
            return []
        return parse_rows(output, projection)

    def delete(self, uri: str, selection: str | None, selection_args: list[str] | None) -> int:
        # The content tool does not report a count, so count the matches first
        count = len(self.query(uri, [c.ID], selection, selection_args, None))
        args = ["content", "delete", "--uri", uri]
        where = bind_selection(selection, selection_args)
        if where:
            args += ["--where", where]
        self.client.shell(*args)
        return count

    def _last_inserted_uri(self, uri: str) -> str | None:
        base = strip_query(uri)
        rows = self.query(base, [c.ID], None, None, f"{c.ID} DESC")
        if not rows or rows[0].get(c.ID) is None:
            return None
        return f"{base}/{rows[0][c.ID]}"

    def _apply(self, op: ContentProviderOperation, results: list[ContentProviderResult]) -> ContentProviderResult:
        values = dict(op.values)
        for column, index in op.value_back_references.items():
            if index >= len(results) or results[index].last_path_segment is None:
                raise ProviderError(f"No result to back-reference at index {index}")
            values[column] = int(results[index].last_path_segment)

        if op.type == OperationType.DELETE:
            return ContentProviderResult(count=self.delete(op.uri, op.selection, op.selection_args))

        binds: list[str] = []
        for column, value in values.items():
            binds += ["--bind", bind_value(column, value)]

        if op.type == OperationType.INSERT:
            self.client.shell("content", "insert", "--uri", op.uri, *binds)
            return ContentProviderResult(uri=self._last_inserted_uri(op.uri))

        args = ["content", "update", "--uri", op.uri, *binds]
        where = bind_selection(op.selection, op.selection_args)
        if where:
            args += ["--where", where]
        self.client.shell(*args)
        return ContentProviderResult()

    def apply_batch(
        self, authority: str, operations: list[ContentProviderOperation]
    ) -> list[ContentProviderResult]:
        logger.info(f"Applying {len(operations)} operations to {authority}")
        results: list[ContentProviderResult] = []
        for index, op in enumerate(operations):
            try:
                results.append(self._apply(op, results))
            except ProviderError as e:
                raise OperationApplicationError(str(e), index=index) from e
        return results

    def open_input_stream(self, uri: str) -> bytes:
        return self.client.exec_out("content", "read", "--uri", uri)


class AdbAccountManager(AccountManager):
    """Lists device accounts from ``dumpsys account``."""

    def __init__(self, client: AdbClient):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdbAccountManager":
        return cls(AdbClient.from_settings(settings))

    def get_accounts(self) -> list[Account]:
        output = self.client.shell("dumpsys", "account")
        accounts: list[Account] = []
        seen: set[tuple[str, str]] = set()
        for match in _ACCOUNT_PATTERN.finditer(output):
            key = (match.group("name"), match.group("type"))
            if key in seen:
                continue
            seen.add(key)
            accounts.append(Account(name=key[0], type=key[1]))
        return accounts
