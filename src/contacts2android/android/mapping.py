"""Field mapping tables and type code translators.

Every table here is built once at import time and exposed read-only. The
tables tie together three vocabularies:

- logical contact field names used by the JSON API ("phoneNumbers",
  "addresses.locality", ...),
- provider attribute kinds (:class:`Kind`, one MIME type per kind),
- the provider columns each kind stores its values, type code and custom
  label in.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from contacts2android.android import contract as c
from contacts2android.android.contract import Kind


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class KindLayout:
    """How one attribute kind is laid out in provider columns."""

    kind: Kind
    columns: tuple[str, ...]
    value_column: str | None = None
    type_column: str | None = None
    label_column: str | None = None
    types: Mapping[int, str] = field(default_factory=lambda: _frozen({}))
    aliases: Mapping[str, int] = field(default_factory=lambda: _frozen({}))
    custom: int | None = None
    default: int | None = None

    @property
    def has_types(self) -> bool:
        return bool(self.types)


PHONE_TYPES = _frozen({
    c.PhoneType.CUSTOM: "custom",
    c.PhoneType.HOME: "home",
    c.PhoneType.MOBILE: "mobile",
    c.PhoneType.WORK: "work",
    c.PhoneType.FAX_WORK: "work fax",
    c.PhoneType.FAX_HOME: "home fax",
    c.PhoneType.PAGER: "pager",
    c.PhoneType.OTHER: "other",
    c.PhoneType.CALLBACK: "callback",
    c.PhoneType.CAR: "car",
    c.PhoneType.COMPANY_MAIN: "company main",
    c.PhoneType.ISDN: "isdn",
    c.PhoneType.MAIN: "main",
    c.PhoneType.OTHER_FAX: "other fax",
    c.PhoneType.RADIO: "radio",
    c.PhoneType.TELEX: "telex",
    c.PhoneType.TTY_TDD: "tty tdd",
    c.PhoneType.WORK_MOBILE: "work mobile",
    c.PhoneType.WORK_PAGER: "work pager",
    c.PhoneType.ASSISTANT: "assistant",
    c.PhoneType.MMS: "mms",
})

EMAIL_TYPES = _frozen({
    c.EmailType.CUSTOM: "custom",
    c.EmailType.HOME: "home",
    c.EmailType.WORK: "work",
    c.EmailType.OTHER: "other",
    c.EmailType.MOBILE: "mobile",
})

POSTAL_TYPES = _frozen({
    c.PostalType.CUSTOM: "custom",
    c.PostalType.HOME: "home",
    c.PostalType.WORK: "work",
    c.PostalType.OTHER: "other",
})

ORGANIZATION_TYPES = _frozen({
    c.OrganizationType.CUSTOM: "custom",
    c.OrganizationType.WORK: "work",
    c.OrganizationType.OTHER: "other",
})

IM_PROTOCOLS = _frozen({
    c.ImProtocol.CUSTOM: "custom",
    c.ImProtocol.AIM: "aim",
    c.ImProtocol.MSN: "msn",
    c.ImProtocol.YAHOO: "yahoo",
    c.ImProtocol.SKYPE: "skype",
    c.ImProtocol.QQ: "qq",
    c.ImProtocol.GOOGLE_TALK: "gtalk",
    c.ImProtocol.ICQ: "icq",
    c.ImProtocol.JABBER: "jabber",
    c.ImProtocol.NETMEETING: "netmeeting",
})

WEBSITE_TYPES = _frozen({
    c.WebsiteType.CUSTOM: "custom",
    c.WebsiteType.HOMEPAGE: "homepage",
    c.WebsiteType.BLOG: "blog",
    c.WebsiteType.PROFILE: "profile",
    c.WebsiteType.HOME: "home",
    c.WebsiteType.WORK: "work",
    c.WebsiteType.FTP: "ftp",
    c.WebsiteType.OTHER: "other",
})

EVENT_TYPES = _frozen({
    c.EventType.CUSTOM: "custom",
    c.EventType.ANNIVERSARY: "anniversary",
    c.EventType.OTHER: "other",
    c.EventType.BIRTHDAY: "birthday",
})

RELATION_TYPES = _frozen({
    c.RelationType.CUSTOM: "custom",
    c.RelationType.ASSISTANT: "assistant",
    c.RelationType.BROTHER: "brother",
    c.RelationType.CHILD: "child",
    c.RelationType.DOMESTIC_PARTNER: "domestic_partner",
    c.RelationType.FATHER: "father",
    c.RelationType.FRIEND: "friend",
    c.RelationType.MANAGER: "manager",
    c.RelationType.MOTHER: "mother",
    c.RelationType.PARENT: "parent",
    c.RelationType.PARTNER: "partner",
    c.RelationType.REFERRED_BY: "referred_by",
    c.RelationType.RELATIVE: "relative",
    c.RelationType.SISTER: "sister",
    c.RelationType.SPOUSE: "spouse",
})

_GENERIC_COLUMNS = (c.VALUE, c.TYPE, c.LABEL)

KIND_LAYOUTS: Mapping[Kind, KindLayout] = _frozen({
    Kind.NAME: KindLayout(
        kind=Kind.NAME,
        columns=(
            c.NAME_DISPLAY_NAME,
            c.NAME_GIVEN_NAME,
            c.NAME_FAMILY_NAME,
            c.NAME_PREFIX,
            c.NAME_MIDDLE_NAME,
            c.NAME_SUFFIX,
        ),
    ),
    Kind.PHONE: KindLayout(
        kind=Kind.PHONE,
        columns=_GENERIC_COLUMNS,
        value_column=c.VALUE,
        type_column=c.TYPE,
        label_column=c.LABEL,
        types=PHONE_TYPES,
        aliases=_frozen({"fax": c.PhoneType.FAX_WORK, "tty ttd": c.PhoneType.TTY_TDD}),
        custom=c.PhoneType.CUSTOM,
        default=c.PhoneType.OTHER,
    ),
    Kind.EMAIL: KindLayout(
        kind=Kind.EMAIL,
        columns=_GENERIC_COLUMNS,
        value_column=c.VALUE,
        type_column=c.TYPE,
        label_column=c.LABEL,
        types=EMAIL_TYPES,
        custom=c.EmailType.CUSTOM,
        default=c.EmailType.OTHER,
    ),
    Kind.POSTAL: KindLayout(
        kind=Kind.POSTAL,
        columns=(
            c.POSTAL_FORMATTED_ADDRESS,
            c.TYPE,
            c.LABEL,
            c.POSTAL_STREET,
            c.POSTAL_CITY,
            c.POSTAL_REGION,
            c.POSTAL_POSTCODE,
            c.POSTAL_COUNTRY,
        ),
        value_column=c.POSTAL_FORMATTED_ADDRESS,
        type_column=c.TYPE,
        label_column=c.LABEL,
        types=POSTAL_TYPES,
        custom=c.PostalType.CUSTOM,
        default=c.PostalType.OTHER,
    ),
    Kind.ORGANIZATION: KindLayout(
        kind=Kind.ORGANIZATION,
        columns=(c.ORG_COMPANY, c.TYPE, c.LABEL, c.ORG_TITLE, c.ORG_DEPARTMENT),
        value_column=c.ORG_COMPANY,
        type_column=c.TYPE,
        label_column=c.LABEL,
        types=ORGANIZATION_TYPES,
        custom=c.OrganizationType.CUSTOM,
        default=c.OrganizationType.OTHER,
    ),
    Kind.IM: KindLayout(
        kind=Kind.IM,
        columns=(c.VALUE, c.IM_PROTOCOL, c.IM_CUSTOM_PROTOCOL),
        value_column=c.VALUE,
        type_column=c.IM_PROTOCOL,
        label_column=c.IM_CUSTOM_PROTOCOL,
        types=IM_PROTOCOLS,
        aliases=_frozen({"google talk": c.ImProtocol.GOOGLE_TALK}),
        custom=c.ImProtocol.CUSTOM,
        default=c.ImProtocol.CUSTOM,
    ),
    Kind.NOTE: KindLayout(kind=Kind.NOTE, columns=(c.VALUE,), value_column=c.VALUE),
    Kind.NICKNAME: KindLayout(kind=Kind.NICKNAME, columns=(c.VALUE,), value_column=c.VALUE),
    Kind.WEBSITE: KindLayout(
        kind=Kind.WEBSITE,
        columns=_GENERIC_COLUMNS,
        value_column=c.VALUE,
        type_column=c.TYPE,
        label_column=c.LABEL,
        types=WEBSITE_TYPES,
        custom=c.WebsiteType.CUSTOM,
        default=c.WebsiteType.OTHER,
    ),
    Kind.EVENT: KindLayout(
        kind=Kind.EVENT,
        columns=_GENERIC_COLUMNS,
        value_column=c.VALUE,
        type_column=c.TYPE,
        label_column=c.LABEL,
        types=EVENT_TYPES,
        custom=c.EventType.CUSTOM,
        default=c.EventType.OTHER,
    ),
    Kind.PHOTO: KindLayout(kind=Kind.PHOTO, columns=(c.PHOTO,), value_column=c.PHOTO),
    Kind.RELATION: KindLayout(
        kind=Kind.RELATION,
        columns=_GENERIC_COLUMNS,
        value_column=c.VALUE,
        type_column=c.TYPE,
        label_column=c.LABEL,
        types=RELATION_TYPES,
        custom=c.RelationType.CUSTOM,
        default=c.RelationType.CUSTOM,
    ),
})

# Array-valued contact fields, in the order the writer emits them
ARRAY_FIELDS: Mapping[str, Kind] = _frozen({
    "photos": Kind.PHOTO,
    "phoneNumbers": Kind.PHONE,
    "emails": Kind.EMAIL,
    "addresses": Kind.POSTAL,
    "organizations": Kind.ORGANIZATION,
    "ims": Kind.IM,
    "urls": Kind.WEBSITE,
    "relations": Kind.RELATION,
    "about": Kind.EVENT,
})

# Scalar fields stored in their own single-value kind
SCALAR_FIELDS: Mapping[str, Kind] = _frozen({
    "note": Kind.NOTE,
    "nickname": Kind.NICKNAME,
})

# Raw contact bookkeeping fields: JSON name -> raw contact column
SYNC_FIELDS: Mapping[str, str] = _frozen({
    "sourceId": c.SOURCE_ID,
    "sync1": c.SYNC1,
    "sync2": c.SYNC2,
    "sync3": c.SYNC3,
    "sync4": c.SYNC4,
})

# JSON name -> StructuredName column
NAME_FIELDS: Mapping[str, str] = _frozen({
    "familyName": c.NAME_FAMILY_NAME,
    "middleName": c.NAME_MIDDLE_NAME,
    "givenName": c.NAME_GIVEN_NAME,
    "honorificPrefix": c.NAME_PREFIX,
    "honorificSuffix": c.NAME_SUFFIX,
})

# Searchable logical field name -> provider column
FIELD_COLUMNS: Mapping[str, str] = _frozen({
    "id": c.CONTACT_ID,
    "displayName": c.DISPLAY_NAME,
    "name": c.NAME_DISPLAY_NAME,
    "name.formatted": c.NAME_DISPLAY_NAME,
    "name.familyName": c.NAME_FAMILY_NAME,
    "name.givenName": c.NAME_GIVEN_NAME,
    "name.middleName": c.NAME_MIDDLE_NAME,
    "name.honorificPrefix": c.NAME_PREFIX,
    "name.honorificSuffix": c.NAME_SUFFIX,
    "nickname": c.VALUE,
    "phoneNumbers": c.VALUE,
    "phoneNumbers.value": c.VALUE,
    "emails": c.VALUE,
    "emails.value": c.VALUE,
    "addresses": c.POSTAL_FORMATTED_ADDRESS,
    "addresses.formatted": c.POSTAL_FORMATTED_ADDRESS,
    "addresses.streetAddress": c.POSTAL_STREET,
    "addresses.locality": c.POSTAL_CITY,
    "addresses.region": c.POSTAL_REGION,
    "addresses.postalCode": c.POSTAL_POSTCODE,
    "addresses.country": c.POSTAL_COUNTRY,
    "ims": c.VALUE,
    "ims.value": c.VALUE,
    "organizations": c.ORG_COMPANY,
    "organizations.name": c.ORG_COMPANY,
    "organizations.department": c.ORG_DEPARTMENT,
    "organizations.title": c.ORG_TITLE,
    "note": c.VALUE,
    "urls": c.VALUE,
    "urls.value": c.VALUE,
    "dirty": c.DIRTY,
    "deleted": c.DELETED,
    "sourceId": c.SOURCE_ID,
    "sync1": c.SYNC1,
    "sync2": c.SYNC2,
    "sync3": c.SYNC3,
    "sync4": c.SYNC4,
})

# Root field name -> kind its search clause is scoped to
SEARCH_SCOPES: Mapping[str, Kind] = _frozen({
    "name": Kind.NAME,
    "nickname": Kind.NICKNAME,
    "phoneNumbers": Kind.PHONE,
    "emails": Kind.EMAIL,
    "addresses": Kind.POSTAL,
    "ims": Kind.IM,
    "organizations": Kind.ORGANIZATION,
    "note": Kind.NOTE,
    "urls": Kind.WEBSITE,
})

# Fields a ["*"] search expands to, in clause order
WILDCARD_SEARCH_FIELDS = (
    "displayName",
    "name",
    "nickname",
    "phoneNumbers",
    "emails",
    "addresses",
    "ims",
    "organizations",
    "note",
    "urls",
)


def _layout_with_types(kind: Kind) -> KindLayout:
    layout = KIND_LAYOUTS[kind]
    if not layout.has_types:
        raise ValueError(f"{kind.name} has no type codes")
    return layout


def type_to_code(kind: Kind, type_name: str | None) -> int:
    """Translate a JSON type string to the provider's type code for ``kind``.

    Matching is case-insensitive. A missing type maps to the kind's default
    code; any other unrecognised string maps to the custom sentinel, in which
    case the caller stores the original string in the label column.
    """
    layout = _layout_with_types(kind)
    if type_name is None:
        return layout.default
    lowered = type_name.strip().lower()
    for code, name in layout.types.items():
        if name == lowered:
            return code
    if lowered in layout.aliases:
        return layout.aliases[lowered]
    return layout.custom


def code_to_type(kind: Kind, code: int | None) -> str:
    """Translate a provider type code back to its JSON type string."""
    layout = _layout_with_types(kind)
    if code is not None and code in layout.types:
        return layout.types[code]
    return layout.types[layout.default]


def is_custom(kind: Kind, code: int) -> bool:
    """Whether ``code`` is the custom sentinel that needs a label column."""
    return code == _layout_with_types(kind).custom
