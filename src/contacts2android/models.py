"""Data models for contacts2android.

The JSON side of the bridge follows the W3C Contacts API: camelCase keys,
array-valued fields of typed items, and ``null`` members left out.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContactModel(BaseModel):
    """Base for every JSON contact structure."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, Any]:
        """Render with camelCase keys, omitting null members."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ContactField(ContactModel):
    """Generic typed value (phone number, email, IM, url, relation, event, photo)."""

    id: str | None = None
    pref: bool = Field(default=False, description="Android has no preferred flag")
    type: str | None = None
    value: str | None = None


class ContactAddress(ContactModel):
    """Postal address."""

    id: str | None = None
    pref: bool = False
    type: str | None = None
    formatted: str | None = None
    street_address: str | None = None
    locality: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None


class ContactOrganization(ContactModel):
    """Organization the contact belongs to."""

    id: str | None = None
    pref: bool = False
    type: str | None = None
    name: str | None = None
    department: str | None = None
    title: str | None = None


class ContactName(ContactModel):
    """Structured name."""

    formatted: str | None = None
    family_name: str | None = None
    given_name: str | None = None
    middle_name: str | None = None
    honorific_prefix: str | None = None
    honorific_suffix: str | None = None

    @classmethod
    def from_parts(
        cls,
        family_name: str | None = None,
        given_name: str | None = None,
        middle_name: str | None = None,
        honorific_prefix: str | None = None,
        honorific_suffix: str | None = None,
    ) -> "ContactName":
        """Build a name, composing ``formatted`` from the parts that are present."""
        formatted = ""
        if honorific_prefix is not None:
            formatted += honorific_prefix + " "
        if given_name is not None:
            formatted += given_name + " "
        if middle_name is not None:
            formatted += middle_name + " "
        if family_name is not None:
            formatted += family_name
        if honorific_suffix is not None:
            formatted += " " + honorific_suffix

        return cls(
            formatted=formatted,
            family_name=family_name,
            given_name=given_name,
            middle_name=middle_name,
            honorific_prefix=honorific_prefix,
            honorific_suffix=honorific_suffix,
        )


class Contact(ContactModel):
    """Contact as read back from the provider."""

    # Aggregate contact id (may be null once a raw contact is dissociated)
    id: str | None = None
    raw_id: str | None = None
    version: int | None = None

    # Sync adapter bookkeeping
    dirty: bool = False
    deleted: bool = False
    source_id: str | None = None
    sync1: str | None = None
    sync2: str | None = None
    sync3: str | None = None
    sync4: str | None = None

    display_name: str | None = None
    name: ContactName | None = None
    nickname: str | None = None
    note: str | None = None
    birthday: str | None = None

    phone_numbers: list[ContactField] | None = None
    emails: list[ContactField] | None = None
    addresses: list[ContactAddress] | None = None
    organizations: list[ContactOrganization] | None = None
    ims: list[ContactField] | None = None
    urls: list[ContactField] | None = None
    relations: list[ContactField] | None = None
    about: list[ContactField] | None = None
    photos: list[ContactField] | None = None


class FindOptions(ContactModel):
    """Options accepted by a contact search."""

    filter: str | None = ""
    multiple: bool = True
    desired_fields: list[str] | None = None
    account_type: str | None = None
    account_name: str | None = None


class Account(BaseModel):
    """An account registered on the device."""

    name: str
    type: str


class Intent(BaseModel):
    """Launch request handed back to the account framework."""

    action: str = "android.intent.action.MAIN"
    categories: list[str] = Field(default_factory=lambda: ["android.intent.category.LAUNCHER"])
    package: str | None = None
    component: str | None = None
    flags: int = 0
