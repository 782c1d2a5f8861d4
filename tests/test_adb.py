"""
Tests for the adb-backed content resolver and account manager.
"""

import subprocess

import pytest

from contacts2android.android import adb
from contacts2android.android import contract as c
from contacts2android.android.adb import (
    AdbAccountManager,
    AdbClient,
    AdbContentResolver,
    bind_selection,
    bind_value,
    parse_rows,
)
from contacts2android.android.resolver import ContentProviderOperation
from contacts2android.exceptions import AdbError, OperationApplicationError, ProviderError


class FakeRun:
    """Stands in for subprocess.run, answering commands from a script."""

    def __init__(self, outputs=None, returncode=0, stderr=b""):
        self.outputs = list(outputs or [])
        self.returncode = returncode
        self.stderr = stderr
        self.commands = []

    def __call__(self, command, capture_output, timeout, check):
        self.commands.append(command)
        stdout = self.outputs.pop(0) if self.outputs else b""
        return subprocess.CompletedProcess(command, self.returncode, stdout, self.stderr)

    @property
    def shell_commands(self):
        return [command[-1] for command in self.commands]


@pytest.fixture
def fake_run(monkeypatch):
    run = FakeRun()
    monkeypatch.setattr(adb.subprocess, "run", run)
    return run


@pytest.fixture
def client():
    return AdbClient("adb", serial="emulator-5554", timeout=5)


# ─────────────────────────────────────────────────────────────────────────────
# Output parsing and argument binding
# ─────────────────────────────────────────────────────────────────────────────


class TestParseRows:
    def test_rows_with_nulls(self):
        output = "Row: 0 _id=1, data1=Ann, data2=NULL\nRow: 1 _id=2, data1=Bob, data2=2\n"
        assert parse_rows(output) == [
            {"_id": "1", "data1": "Ann", "data2": None},
            {"_id": "2", "data1": "Bob", "data2": "2"},
        ]

    def test_values_with_commas_survive_with_projection(self):
        output = "Row: 0 _id=1, data1=1 Main St, Springfield, data7=Springfield\n"
        rows = parse_rows(output, ["_id", "data1", "data7"])
        assert rows == [{"_id": "1", "data1": "1 Main St, Springfield", "data7": "Springfield"}]

    def test_photo_blob_is_none(self):
        assert parse_rows("Row: 0 _id=1, data15=BLOB")[0][c.PHOTO] is None

    def test_ignores_other_lines(self):
        assert parse_rows("No result found.\n") == []


class TestBinding:
    def test_bind_selection_quotes_arguments(self):
        bound = bind_selection("(data1 LIKE ? ) OR (_id = ? )", ["%O'Hara%", "4"])
        assert bound == "(data1 LIKE '%O''Hara%' ) OR (_id = '4' )"

    def test_bind_selection_argument_count_mismatch(self):
        with pytest.raises(ProviderError):
            bind_selection("_id = ?", [])

    def test_bind_selection_without_selection(self):
        assert bind_selection(None, None) is None

    def test_bind_value_types(self):
        assert bind_value("data1", "Ann") == "data1:s:Ann"
        assert bind_value("data2", 2) == "data2:i:2"
        assert bind_value("data2", 2**40) == "data2:l:1099511627776"
        assert bind_value("dirty", True) == "dirty:b:true"
        assert bind_value("data3", None) == "data3:n:"

    def test_bind_value_rejects_blobs(self):
        with pytest.raises(ProviderError):
            bind_value("data15", b"\x89PNG")


# ─────────────────────────────────────────────────────────────────────────────
# Client
# ─────────────────────────────────────────────────────────────────────────────


class TestAdbClient:
    def test_serial_and_quoting(self, fake_run, client):
        client.shell("content", "query", "--where", "data1 LIKE '%a%'")
        command = fake_run.commands[0]
        assert command[:4] == ["adb", "-s", "emulator-5554", "shell"]
        assert command[4] == "content query --where 'data1 LIKE '\"'\"'%a%'\"'\"''"

    def test_nonzero_exit_raises(self, fake_run, client):
        fake_run.returncode = 1
        fake_run.stderr = b"error: no devices/emulators found"
        with pytest.raises(AdbError, match="no devices"):
            client.shell("dumpsys", "account")

    def test_provider_error_on_stdout_raises(self, fake_run, client):
        fake_run.outputs = [b"Error while accessing provider:com.android.contacts\n"]
        with pytest.raises(AdbError):
            client.shell("content", "query", "--uri", c.DATA_URI)

    def test_missing_binary(self, monkeypatch, client):
        def missing(*args, **kwargs):
            raise FileNotFoundError("adb")

        monkeypatch.setattr(adb.subprocess, "run", missing)
        with pytest.raises(AdbError):
            client.shell("dumpsys", "account")


# ─────────────────────────────────────────────────────────────────────────────
# Content resolver
# ─────────────────────────────────────────────────────────────────────────────


class TestAdbContentResolver:
    def test_query_command(self, fake_run, client):
        fake_run.outputs = [b"Row: 0 _id=3, mimetype=vnd.android.cursor.item/name\n"]
        rows = AdbContentResolver(client).query(
            c.RAW_CONTACTS_ENTITY_URI, ["_id", "mimetype"], "_id = ?", ["3"], "_id ASC"
        )
        assert rows == [{"_id": "3", "mimetype": "vnd.android.cursor.item/name"}]
        shell = fake_run.shell_commands[0]
        assert "--projection _id:mimetype" in shell
        assert "--where '_id = '\"'\"'3'\"'\"''" in shell
        assert "--sort '_id ASC'" in shell

    def test_query_no_result(self, fake_run, client):
        fake_run.outputs = [b"No result found.\n"]
        assert AdbContentResolver(client).query(c.DATA_URI, None, None, None, None) == []

    def test_delete_counts_matches_first(self, fake_run, client):
        fake_run.outputs = [b"Row: 0 _id=42\n", b""]
        count = AdbContentResolver(client).delete(c.RAW_CONTACTS_URI, "_id = ?", ["42"])
        assert count == 1
        assert fake_run.shell_commands[1].startswith("content delete")

    def test_batch_resolves_back_references(self, fake_run, client):
        fake_run.outputs = [
            b"",  # raw contact insert
            b"Row: 0 _id=77\n",  # newest raw contact id
            b"",  # data insert
            b"Row: 0 _id=500\n",  # newest data id
        ]
        ops = [
            ContentProviderOperation.new_insert(c.RAW_CONTACTS_URI, {c.DIRTY: 0}),
            ContentProviderOperation.new_insert(
                c.DATA_URI, {c.MIMETYPE: "vnd.android.cursor.item/note", c.VALUE: "hi"}
            ).with_back_reference(c.RAW_CONTACT_ID, 0),
        ]
        results = AdbContentResolver(client).apply_batch(c.AUTHORITY, ops)

        assert [result.last_path_segment for result in results] == ["77", "500"]
        assert "raw_contact_id:i:77" in fake_run.shell_commands[2]
        assert "_id DESC" in fake_run.shell_commands[1]

    def test_batch_failure_names_the_operation(self, fake_run, client):
        ops = [
            ContentProviderOperation.new_update(c.DATA_URI, "_id=?", ["1"], {c.VALUE: "x"}),
            ContentProviderOperation.new_insert(c.DATA_URI, {c.PHOTO: b"png"}),
        ]
        with pytest.raises(OperationApplicationError) as exc_info:
            AdbContentResolver(client).apply_batch(c.AUTHORITY, ops)
        assert exc_info.value.index == 1

    def test_open_input_stream_uses_exec_out(self, fake_run, client):
        fake_run.outputs = [b"\x89PNG"]
        data = AdbContentResolver(client).open_input_stream("content://com.android.contacts/display_photo/1")
        assert data == b"\x89PNG"
        assert fake_run.commands[0][3] == "exec-out"


class TestAdbAccountManager:
    def test_parses_dumpsys(self, fake_run, client):
        fake_run.outputs = [
            b"Accounts: 2\n"
            b"    Account {name=ann@gmail.com, type=com.google}\n"
            b"    Account {name=ann@corp.com, type=com.android.exchange}\n"
            b"  RegisteredServicesCache: 3 services\n"
            b"    Account {name=ann@gmail.com, type=com.google}\n"
        ]
        accounts = AdbAccountManager(client).get_accounts()
        assert [(account.name, account.type) for account in accounts] == [
            ("ann@gmail.com", "com.google"),
            ("ann@corp.com", "com.android.exchange"),
        ]
