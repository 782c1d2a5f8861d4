"""Turn a JSON contact into an ordered batch of provider operations.

Operation 0 is always the raw contact upsert; every data row inserted for a
new contact back-references it for its ``raw_contact_id``.
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import TypeAdapter, ValidationError

from contacts2android.android import contract as c
from contacts2android.android.contract import Kind
from contacts2android.android.mapping import (
    ARRAY_FIELDS,
    KIND_LAYOUTS,
    NAME_FIELDS,
    SCALAR_FIELDS,
    SYNC_FIELDS,
    is_custom,
    type_to_code,
)
from contacts2android.android.resolver import ContentProviderOperation, ContentProviderResult, as_sync_adapter
from contacts2android.exceptions import PhotoLoadError
from contacts2android.models import ContactAddress, ContactField, ContactName, ContactOrganization

logger = logging.getLogger(__name__)

NEW_CONTACT = -1

PhotoLoaderFn = Callable[[ContactField], bytes]

_FIELD_ADAPTER = TypeAdapter(list[ContactField])
_ITEM_ADAPTERS = {
    Kind.POSTAL: TypeAdapter(list[ContactAddress]),
    Kind.ORGANIZATION: TypeAdapter(list[ContactOrganization]),
}


def parse_raw_id(value: Any) -> int:
    """Return the raw contact id, or ``NEW_CONTACT`` when it is absent or not an integer."""
    if value is None or isinstance(value, bool):
        return NEW_CONTACT
    try:
        return int(str(value).strip())
    except ValueError:
        return NEW_CONTACT


def _scalar(contact: dict[str, Any], key: str) -> str | None:
    value = contact.get(key)
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


class SaveOperationBuilder:
    """Builds the operation batch for one save."""

    def __init__(
        self,
        raw_id: int,
        account_type: str | None,
        account_name: str | None,
        caller_is_sync_adapter: bool = False,
        reset_fields: bool = False,
        photo_loader: PhotoLoaderFn | None = None,
    ):
        self.raw_id = raw_id
        self.account_type = account_type
        self.account_name = account_name
        self.reset_fields = reset_fields
        self.photo_loader = photo_loader
        self.data_uri = c.DATA_URI
        self.raw_contacts_uri = c.RAW_CONTACTS_URI
        if caller_is_sync_adapter:
            self.data_uri = as_sync_adapter(self.data_uri)
            self.raw_contacts_uri = as_sync_adapter(self.raw_contacts_uri)
        self.operations: list[ContentProviderOperation] = []

    @property
    def is_new(self) -> bool:
        return self.raw_id == NEW_CONTACT

    def _by_kind(self, kind: Kind) -> tuple[str, list[str]]:
        return f"{c.RAW_CONTACT_ID}=? AND {c.MIMETYPE}=?", [str(self.raw_id), kind.value]

    def _upsert_for_contact(self, kind: Kind, values: dict[str, Any]) -> None:
        """Insert a row for a new contact, or update the contact's row of ``kind``."""
        if self.is_new:
            op = ContentProviderOperation.new_insert(
                self.data_uri, {c.MIMETYPE: kind.value, **values}
            ).with_back_reference(c.RAW_CONTACT_ID, 0)
        else:
            selection, args = self._by_kind(kind)
            op = ContentProviderOperation.new_update(self.data_uri, selection, args, values)
        self.operations.append(op)

    def _delete_kind(self, kind: Kind, selection_suffix: str = "", extra_args: list[str] | None = None) -> None:
        selection, args = self._by_kind(kind)
        self.operations.append(
            ContentProviderOperation.new_delete(
                self.data_uri, selection + selection_suffix, args + (extra_args or [])
            )
        )

    def add_raw_contact(self, contact: dict[str, Any]) -> None:
        values: dict[str, Any] = {}
        source_id = _scalar(contact, "sourceId")
        if source_id is not None:
            values[c.SOURCE_ID] = source_id
        values[c.DIRTY] = 1 if contact.get("dirty") is True else 0
        values[c.DELETED] = 1 if contact.get("deleted") is True else 0
        for key, column in SYNC_FIELDS.items():
            if key == "sourceId":
                continue
            value = _scalar(contact, key)
            if value is not None:
                values[column] = value
        values[c.ACCOUNT_TYPE] = self.account_type
        values[c.ACCOUNT_NAME] = self.account_name

        if self.is_new:
            op = ContentProviderOperation.new_insert(self.raw_contacts_uri, values)
        else:
            op = ContentProviderOperation.new_update(
                self.raw_contacts_uri, f"{c.ID}=?", [str(self.raw_id)], values
            )
        self.operations.append(op)

    def add_name(self, contact: dict[str, Any]) -> None:
        values: dict[str, Any] = {}
        display_name = _scalar(contact, "displayName")
        if display_name is not None:
            values[c.NAME_DISPLAY_NAME] = display_name

        raw_name = contact.get("name")
        if raw_name is not None:
            try:
                name = ContactName.model_validate(raw_name)
            except ValidationError as e:
                logger.debug(f"Could not get name: {e}")
            else:
                parts = name.model_dump(by_alias=True)
                for key, column in NAME_FIELDS.items():
                    if parts.get(key) is not None:
                        values[column] = parts[key]

        if values:
            self._upsert_for_contact(Kind.NAME, values)

    def add_scalar(self, contact: dict[str, Any], field: str, kind: Kind) -> None:
        value = _scalar(contact, field)
        if value is not None:
            self._upsert_for_contact(kind, {KIND_LAYOUTS[kind].value_column: value})

    def _content_values(self, kind: Kind, item: Any) -> dict[str, Any] | None:
        layout = KIND_LAYOUTS[kind]
        values: dict[str, Any]

        if kind == Kind.POSTAL:
            values = {
                c.POSTAL_FORMATTED_ADDRESS: item.formatted,
                c.POSTAL_STREET: item.street_address,
                c.POSTAL_CITY: item.locality,
                c.POSTAL_REGION: item.region,
                c.POSTAL_POSTCODE: item.postal_code,
                c.POSTAL_COUNTRY: item.country,
            }
        elif kind == Kind.ORGANIZATION:
            values = {
                c.ORG_COMPANY: item.name,
                c.ORG_TITLE: item.title,
                c.ORG_DEPARTMENT: item.department,
            }
        elif kind == Kind.PHOTO:
            if self.photo_loader is None:
                logger.warning("No photo loader configured, skipping photo")
                return None
            try:
                photo = self.photo_loader(item)
            except PhotoLoadError as e:
                logger.warning(f"Skipping photo: {e}")
                return None
            return {c.IS_SUPER_PRIMARY: 1, c.PHOTO: photo}
        else:
            values = {layout.value_column: item.value}

        code = type_to_code(kind, item.type)
        values[layout.type_column] = code
        if is_custom(kind, code):
            values[layout.label_column] = item.type
        return values

    def add_items(self, kind: Kind, items: list, clear: bool = False) -> None:
        """Emit the delete, insert and update operations for one array field."""
        if not self.is_new and (clear or not items or self.reset_fields):
            logger.debug(f"Clearing all {kind.name} rows of raw contact {self.raw_id}")
            self._delete_kind(kind)
        self._write_items(kind, items)

    def _write_items(self, kind: Kind, items: list) -> None:
        for item in items:
            values = self._content_values(kind, item)
            if values is None:
                continue

            if self.is_new:
                values[c.MIMETYPE] = kind.value
                op = ContentProviderOperation.new_insert(self.data_uri, values).with_back_reference(
                    c.RAW_CONTACT_ID, 0
                )
            elif item.id is None or self.reset_fields:
                values[c.RAW_CONTACT_ID] = self.raw_id
                values[c.MIMETYPE] = kind.value
                op = ContentProviderOperation.new_insert(self.data_uri, values)
            else:
                op = ContentProviderOperation.new_update(
                    self.data_uri, f"{c.ID}=? AND {c.MIMETYPE}=?", [item.id, kind.value], values
                )
            self.operations.append(op)

    def _delete_birthdays(self) -> None:
        self._delete_kind(Kind.EVENT, f" AND {c.TYPE}=?", [str(int(c.EventType.BIRTHDAY))])

    def add_events(self, contact: dict[str, Any], about: list[ContactField] | None) -> None:
        """Write ``about`` events, with ``birthday`` as a leading birthday-typed event."""
        birthday = _scalar(contact, "birthday")
        if birthday is None:
            if about is not None:
                self.add_items(Kind.EVENT, about)
            return

        birthday_event = ContactField(type="birthday", value=birthday)
        if about is None:
            if not self.is_new:
                self._delete_birthdays()
            self._write_items(Kind.EVENT, [birthday_event])
            return

        # The stored birthday goes away with the rest of the kind when it is cleared
        if not self.is_new and about and not self.reset_fields:
            self._delete_birthdays()
        self.add_items(Kind.EVENT, [birthday_event, *about], clear=not about)

    def build(self, contact: dict[str, Any]) -> list[ContentProviderOperation]:
        self.add_raw_contact(contact)
        self.add_name(contact)

        for field, kind in SCALAR_FIELDS.items():
            self.add_scalar(contact, field, kind)

        for field, kind in ARRAY_FIELDS.items():
            items = parse_items(contact, field, kind)
            if kind == Kind.EVENT:
                self.add_events(contact, items)
            elif items is not None:
                self.add_items(kind, items)

        return self.operations


def parse_items(contact: dict[str, Any], field: str, kind: Kind) -> list | None:
    """Validate one array field, returning None when it is missing or malformed."""
    raw = contact.get(field)
    if raw is None:
        return None
    adapter = _ITEM_ADAPTERS.get(kind, _FIELD_ADAPTER)
    try:
        return adapter.validate_python(raw)
    except ValidationError as e:
        logger.debug(f"Could not get {field}: {e}")
        return None


def build_save_operations(
    contact: dict[str, Any],
    account_type: str | None,
    account_name: str | None,
    caller_is_sync_adapter: bool = False,
    reset_fields: bool = False,
    photo_loader: PhotoLoaderFn | None = None,
) -> tuple[int, list[ContentProviderOperation]]:
    """Build the save batch for ``contact``.

    Returns:
        The parsed raw contact id (``NEW_CONTACT`` for a new contact) and the operations
    """
    raw_id = parse_raw_id(contact.get("rawId"))
    builder = SaveOperationBuilder(
        raw_id,
        account_type,
        account_name,
        caller_is_sync_adapter=caller_is_sync_adapter,
        reset_fields=reset_fields,
        photo_loader=photo_loader,
    )
    return raw_id, builder.build(contact)


def saved_contact_id(raw_id: int, results: list[ContentProviderResult]) -> str | None:
    """Id reported for a successful save: the new row id, or the existing raw id."""
    if raw_id != NEW_CONTACT:
        return str(raw_id)
    if not results:
        return None
    return results[0].last_path_segment
