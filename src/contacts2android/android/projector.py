"""Fold raw-contact entity rows into JSON contacts.

Rows arrive ordered by raw contact id, so every contact's rows form one
contiguous run. The projector walks them once, accumulating the current
contact and flushing it whenever the raw contact id changes.
"""

import base64
import logging
from collections.abc import Iterable
from typing import Any

from contacts2android.android import contract as c
from contacts2android.android.contract import Kind
from contacts2android.android.mapping import KIND_LAYOUTS, code_to_type, is_custom
from contacts2android.android.query import is_required
from contacts2android.android.resolver import Row
from contacts2android.models import (
    Contact,
    ContactAddress,
    ContactField,
    ContactName,
    ContactOrganization,
)

logger = logging.getLogger(__name__)

# Kind -> contact field holding its items
_BUCKETS = {
    Kind.PHONE: "phoneNumbers",
    Kind.EMAIL: "emails",
    Kind.POSTAL: "addresses",
    Kind.ORGANIZATION: "organizations",
    Kind.IM: "ims",
    Kind.WEBSITE: "urls",
    Kind.RELATION: "relations",
    Kind.PHOTO: "photos",
}


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_bool(value: Any) -> bool:
    return _as_int(value) == 1


def _item_id(row: Row) -> str | None:
    return _as_str(row.get(c.DATA_ID))


def _resolve_type(kind: Kind, row: Row) -> str | None:
    layout = KIND_LAYOUTS[kind]
    code = _as_int(row.get(layout.type_column))
    if code is not None and is_custom(kind, code):
        return _as_str(row.get(layout.label_column))
    return code_to_type(kind, code)


def name_query(row: Row) -> ContactName:
    return ContactName.from_parts(
        family_name=_as_str(row.get(c.NAME_FAMILY_NAME)),
        given_name=_as_str(row.get(c.NAME_GIVEN_NAME)),
        middle_name=_as_str(row.get(c.NAME_MIDDLE_NAME)),
        honorific_prefix=_as_str(row.get(c.NAME_PREFIX)),
        honorific_suffix=_as_str(row.get(c.NAME_SUFFIX)),
    )


def generic_query(kind: Kind, row: Row) -> ContactField:
    """Decode a value/type/label row (phone, email, IM, website, event, relation)."""
    return ContactField(
        id=_item_id(row),
        pref=False,
        value=_as_str(row.get(KIND_LAYOUTS[kind].value_column)),
        type=_resolve_type(kind, row),
    )


def address_query(row: Row) -> ContactAddress:
    return ContactAddress(
        id=_item_id(row),
        pref=False,
        type=_resolve_type(Kind.POSTAL, row),
        formatted=_as_str(row.get(c.POSTAL_FORMATTED_ADDRESS)),
        street_address=_as_str(row.get(c.POSTAL_STREET)),
        locality=_as_str(row.get(c.POSTAL_CITY)),
        region=_as_str(row.get(c.POSTAL_REGION)),
        postal_code=_as_str(row.get(c.POSTAL_POSTCODE)),
        country=_as_str(row.get(c.POSTAL_COUNTRY)),
    )


def organization_query(row: Row) -> ContactOrganization:
    return ContactOrganization(
        id=_item_id(row),
        pref=False,
        type=_resolve_type(Kind.ORGANIZATION, row),
        name=_as_str(row.get(c.ORG_COMPANY)),
        department=_as_str(row.get(c.ORG_DEPARTMENT)),
        title=_as_str(row.get(c.ORG_TITLE)),
    )


def photo_query(row: Row) -> ContactField | None:
    """Decode a photo row, or None when the row carries no image."""
    blob = row.get(c.PHOTO)
    if blob is None:
        return None
    if isinstance(blob, str):
        value = blob
    else:
        value = base64.b64encode(bytes(blob)).decode("ascii")
    return ContactField(id=_item_id(row), pref=False, type="base64", value=value)


class _ContactBuffer:
    """Accumulates one raw contact's rows until its run ends."""

    def __init__(self, row: Row, populate: dict[str, bool]):
        self.populate = populate
        self.raw_id = _as_str(row.get(c.ID))
        self.fields: dict[str, Any] = {
            "id": _as_str(row.get(c.CONTACT_ID)),
            "raw_id": self.raw_id,
            "version": _as_int(row.get(c.VERSION)),
            "dirty": _as_bool(row.get(c.DIRTY)),
            "deleted": _as_bool(row.get(c.DELETED)),
            "source_id": _as_str(row.get(c.SOURCE_ID)),
            "sync1": _as_str(row.get(c.SYNC1)),
            "sync2": _as_str(row.get(c.SYNC2)),
            "sync3": _as_str(row.get(c.SYNC3)),
            "sync4": _as_str(row.get(c.SYNC4)),
        }
        self.buckets: dict[str, list] = {}

    def _append(self, field: str, item: Any) -> None:
        self.buckets.setdefault(field, []).append(item)

    def add(self, row: Row) -> None:
        kind = Kind.from_mimetype(_as_str(row.get(c.MIMETYPE)))
        if kind is None:
            return

        if kind == Kind.NAME:
            if is_required("name", self.populate):
                self.fields["name"] = name_query(row)
            if is_required("displayName", self.populate):
                self.fields["display_name"] = _as_str(row.get(c.NAME_DISPLAY_NAME))
        elif kind == Kind.NOTE:
            if is_required("note", self.populate):
                self.fields["note"] = _as_str(row.get(c.VALUE))
        elif kind == Kind.NICKNAME:
            if is_required("nickname", self.populate):
                self.fields["nickname"] = _as_str(row.get(c.VALUE))
        elif kind == Kind.EVENT:
            self._add_event(row)
        else:
            field = _BUCKETS[kind]
            if not is_required(field, self.populate):
                return
            if kind == Kind.POSTAL:
                self._append(field, address_query(row))
            elif kind == Kind.ORGANIZATION:
                self._append(field, organization_query(row))
            elif kind == Kind.PHOTO:
                photo = photo_query(row)
                if photo is not None:
                    self._append(field, photo)
            else:
                self._append(field, generic_query(kind, row))

    def _add_event(self, row: Row) -> None:
        is_birthday = _as_int(row.get(c.TYPE)) == c.EventType.BIRTHDAY
        if (
            is_birthday
            and is_required("birthday", self.populate)
            and self.fields.get("birthday") is None
        ):
            self.fields["birthday"] = _as_str(row.get(c.VALUE))
            return
        if is_required("about", self.populate):
            self._append("about", generic_query(Kind.EVENT, row))

    def to_json(self) -> dict[str, Any]:
        # Buckets are keyed by their camelCase aliases
        return Contact(**self.fields, **self.buckets).to_json()


def populate_contact_array(
    limit: int | None, populate: dict[str, bool], rows: Iterable[Row]
) -> list[dict[str, Any]]:
    """Group rows by raw contact id into at most ``limit`` JSON contacts.

    Args:
        limit: Maximum number of contacts to return, None for no limit
        populate: Population set from :func:`build_population_set`
        rows: Entity rows ordered by raw contact id

    Returns:
        Contacts in first-seen order, each with only the array fields that had rows
    """
    contacts: list[dict[str, Any]] = []
    current: _ContactBuffer | None = None

    for row in rows:
        raw_id = _as_str(row.get(c.ID))
        if current is not None and raw_id != current.raw_id:
            contacts.append(current.to_json())
            current = None
            if limit is not None and len(contacts) >= limit:
                return contacts
        if current is None:
            current = _ContactBuffer(row, populate)
        current.add(row)

    if current is not None and (limit is None or len(contacts) < limit):
        contacts.append(current.to_json())

    logger.debug(f"Projected {len(contacts)} contacts")
    return contacts
