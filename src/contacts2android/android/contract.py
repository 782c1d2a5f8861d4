"""ContactsContract constants: authorities, URIs, columns, MIME types and type codes."""

from enum import Enum, IntEnum

AUTHORITY = "com.android.contacts"
CONTENT_BASE = f"content://{AUTHORITY}"

RAW_CONTACTS_URI = f"{CONTENT_BASE}/raw_contacts"
DATA_URI = f"{CONTENT_BASE}/data"
RAW_CONTACTS_ENTITY_URI = f"{CONTENT_BASE}/raw_contact_entities"

CALLER_IS_SYNCADAPTER = "caller_is_syncadapter"

# Raw contact / entity view columns
ID = "_id"
CONTACT_ID = "contact_id"
RAW_CONTACT_ID = "raw_contact_id"
DATA_ID = "data_id"
MIMETYPE = "mimetype"
VERSION = "version"
DIRTY = "dirty"
DELETED = "deleted"
SOURCE_ID = "sourceid"
SYNC1 = "sync1"
SYNC2 = "sync2"
SYNC3 = "sync3"
SYNC4 = "sync4"
ACCOUNT_TYPE = "account_type"
ACCOUNT_NAME = "account_name"
DATA_SET = "data_set"
DISPLAY_NAME = "display_name"
IS_SUPER_PRIMARY = "is_super_primary"

# Generic data columns shared by every kind
DATA1 = "data1"
DATA2 = "data2"
DATA3 = "data3"
DATA4 = "data4"
DATA5 = "data5"
DATA6 = "data6"
DATA7 = "data7"
DATA8 = "data8"
DATA9 = "data9"
DATA10 = "data10"
DATA15 = "data15"

# StructuredName
NAME_DISPLAY_NAME = DATA1
NAME_GIVEN_NAME = DATA2
NAME_FAMILY_NAME = DATA3
NAME_PREFIX = DATA4
NAME_MIDDLE_NAME = DATA5
NAME_SUFFIX = DATA6

# StructuredPostal
POSTAL_FORMATTED_ADDRESS = DATA1
POSTAL_STREET = DATA4
POSTAL_CITY = DATA7
POSTAL_REGION = DATA8
POSTAL_POSTCODE = DATA9
POSTAL_COUNTRY = DATA10

# Organization
ORG_COMPANY = DATA1
ORG_TITLE = DATA4
ORG_DEPARTMENT = DATA5

# Im
IM_PROTOCOL = DATA5
IM_CUSTOM_PROTOCOL = DATA6

# Photo
PHOTO = DATA15

# Most kinds store value / type / label in the first three data columns
VALUE = DATA1
TYPE = DATA2
LABEL = DATA3

TYPE_CUSTOM = 0


class Kind(str, Enum):
    """Attribute kinds (data row MIME types) the bridge knows how to map."""

    NAME = "vnd.android.cursor.item/name"
    PHONE = "vnd.android.cursor.item/phone_v2"
    EMAIL = "vnd.android.cursor.item/email_v2"
    POSTAL = "vnd.android.cursor.item/postal-address_v2"
    ORGANIZATION = "vnd.android.cursor.item/organization"
    IM = "vnd.android.cursor.item/im"
    NOTE = "vnd.android.cursor.item/note"
    NICKNAME = "vnd.android.cursor.item/nickname"
    WEBSITE = "vnd.android.cursor.item/website"
    EVENT = "vnd.android.cursor.item/contact_event"
    PHOTO = "vnd.android.cursor.item/photo"
    RELATION = "vnd.android.cursor.item/relation"

    @classmethod
    def from_mimetype(cls, mimetype: str | None) -> "Kind | None":
        """Resolve a row's MIME type, returning None for unknown or null kinds."""
        if not mimetype:
            return None
        try:
            return cls(mimetype)
        except ValueError:
            return None


class PhoneType(IntEnum):
    CUSTOM = 0
    HOME = 1
    MOBILE = 2
    WORK = 3
    FAX_WORK = 4
    FAX_HOME = 5
    PAGER = 6
    OTHER = 7
    CALLBACK = 8
    CAR = 9
    COMPANY_MAIN = 10
    ISDN = 11
    MAIN = 12
    OTHER_FAX = 13
    RADIO = 14
    TELEX = 15
    TTY_TDD = 16
    WORK_MOBILE = 17
    WORK_PAGER = 18
    ASSISTANT = 19
    MMS = 20


class EmailType(IntEnum):
    CUSTOM = 0
    HOME = 1
    WORK = 2
    OTHER = 3
    MOBILE = 4


class PostalType(IntEnum):
    CUSTOM = 0
    HOME = 1
    WORK = 2
    OTHER = 3


class OrganizationType(IntEnum):
    CUSTOM = 0
    WORK = 1
    OTHER = 2


class ImProtocol(IntEnum):
    CUSTOM = -1
    AIM = 0
    MSN = 1
    YAHOO = 2
    SKYPE = 3
    QQ = 4
    GOOGLE_TALK = 5
    ICQ = 6
    JABBER = 7
    NETMEETING = 8


class WebsiteType(IntEnum):
    CUSTOM = 0
    HOMEPAGE = 1
    BLOG = 2
    PROFILE = 3
    HOME = 4
    WORK = 5
    FTP = 6
    OTHER = 7


class EventType(IntEnum):
    CUSTOM = 0
    ANNIVERSARY = 1
    OTHER = 2
    BIRTHDAY = 3


class RelationType(IntEnum):
    CUSTOM = 0
    ASSISTANT = 1
    BROTHER = 2
    CHILD = 3
    DOMESTIC_PARTNER = 4
    FATHER = 5
    FRIEND = 6
    MANAGER = 7
    MOTHER = 8
    PARENT = 9
    PARTNER = 10
    REFERRED_BY = 11
    RELATIVE = 12
    SISTER = 13
    SPOUSE = 14
