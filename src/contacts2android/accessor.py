"""Public contact operations: search, get by id, save and remove."""

import logging
import re
from typing import Any

from contacts2android.android import contract as c
from contacts2android.android.photos import PhotoLoader
from contacts2android.android.projector import populate_contact_array
from contacts2android.android.query import (
    MATCH_ALL,
    build_id_clause,
    build_population_set,
    build_projection,
    build_where_clause,
    to_search_term,
)
from contacts2android.android.resolver import AccountManager, ContentResolver, as_sync_adapter
from contacts2android.android.writer import build_save_operations, saved_contact_id
from contacts2android.config import Settings
from contacts2android.exceptions import ProviderError
from contacts2android.models import Account, FindOptions

logger = logging.getLogger(__name__)

EMAIL_REGEXP = re.compile(r".+@.+\.+.+")

ORDER_BY_RAW_ID = f"{c.ID} ASC"


def _is_email(name: str) -> bool:
    return EMAIL_REGEXP.fullmatch(name) is not None


def choose_default_account(accounts: list[Account]) -> Account | None:
    """Pick the account a contact is saved to when none was given.

    The only account wins outright. Otherwise the first Exchange account with
    an email-shaped name, then the first Google one, then any account with an
    email-shaped name.
    """
    if len(accounts) == 1:
        return accounts[0]

    for marker in ("eas", "com.google"):
        for account in accounts:
            if marker in account.type and _is_email(account.name):
                return account

    for account in accounts:
        if _is_email(account.name):
            return account
    return None


class ContactAccessor:
    """Reads and writes W3C contacts through a content resolver."""

    def __init__(
        self,
        resolver: ContentResolver,
        account_manager: AccountManager,
        settings: Settings,
    ):
        self.resolver = resolver
        self.account_manager = account_manager
        self.settings = settings
        self.photo_loader = PhotoLoader(
            resolver,
            max_size=settings.max_photo_size,
            timeout=settings.http_timeout,
        )

    def search(self, fields: list, options: FindOptions | None = None) -> list[dict[str, Any]]:
        """Find contacts whose ``fields`` match ``options.filter``.

        Args:
            fields: Field names to match, or ``["*"]`` for every searchable field
            options: Filter, result multiplicity, desired fields and account scope

        Returns:
            JSON contacts in raw contact id order
        """
        options = options or FindOptions()
        search_term = to_search_term(options.filter)
        limit = None if options.multiple else 1
        account_type = options.account_type
        account_name = options.account_name
        all_contacts = search_term == MATCH_ALL and account_type is None and account_name is None

        populate = build_population_set(options.desired_fields)

        contact_ids: list[str] = []
        if not all_contacts:
            where = build_where_clause(fields, search_term, account_type, account_name)
            if not where.where:
                logger.info("No searchable fields requested")
                return []

            rows = self.resolver.query(
                c.RAW_CONTACTS_ENTITY_URI, [c.ID], where.where, where.where_args, ORDER_BY_RAW_ID
            )
            # dict keeps first-seen order
            contact_ids = list(dict.fromkeys(str(row[c.ID]) for row in rows if row.get(c.ID) is not None))
            logger.debug(f"Matched {len(contact_ids)} raw contacts")
            if not contact_ids:
                return []

        id_clause = build_id_clause(contact_ids, all_contacts)
        rows = self.resolver.query(
            c.RAW_CONTACTS_ENTITY_URI,
            build_projection(populate),
            id_clause.where,
            id_clause.where_args,
            ORDER_BY_RAW_ID,
        )
        return populate_contact_array(limit, populate, rows)

    def get_contact_by_id(
        self, raw_id: str, desired_fields: list[str] | None = None
    ) -> dict[str, Any] | None:
        """Read one raw contact, or None when it does not exist."""
        populate = build_population_set(desired_fields)
        rows = self.resolver.query(
            c.RAW_CONTACTS_ENTITY_URI,
            build_projection(populate),
            f"{c.ID} = ? ",
            [str(raw_id)],
            ORDER_BY_RAW_ID,
        )
        contacts = populate_contact_array(1, populate, rows)
        return contacts[0] if contacts else None

    def _resolve_account(
        self, account_type: str | None, account_name: str | None
    ) -> tuple[str | None, str | None]:
        if account_type is not None and account_name is not None:
            return account_type, account_name
        if self.settings.account_type is not None and self.settings.account_name is not None:
            return self.settings.account_type, self.settings.account_name

        account = choose_default_account(self.account_manager.get_accounts())
        if account is None:
            return None, None
        return account.type, account.name

    def save(
        self,
        contact: dict[str, Any],
        account_type: str | None = None,
        account_name: str | None = None,
        caller_is_sync_adapter: bool = False,
        reset_fields: bool = False,
    ) -> str | None:
        """Insert or update ``contact`` in one batch.

        Returns:
            The new raw contact id, the existing raw id on update, or None on failure
        """
        try:
            account_type, account_name = self._resolve_account(account_type, account_name)
        except ProviderError as e:
            logger.error(f"Could not list accounts: {e}")
            return None
        logger.debug(f"accountType: {account_type}, accountName: {account_name}")

        raw_id, operations = build_save_operations(
            contact,
            account_type,
            account_name,
            caller_is_sync_adapter=caller_is_sync_adapter,
            reset_fields=reset_fields,
            photo_loader=self.photo_loader.load,
        )

        try:
            results = self.resolver.apply_batch(c.AUTHORITY, operations)
        except ProviderError as e:
            logger.error(f"Failed to save contact: {e}", exc_info=True)
            return None

        return saved_contact_id(raw_id, results)

    def remove(self, raw_id: str, caller_is_sync_adapter: bool = False) -> bool:
        """Delete a raw contact.

        For sync adapter callers the delete URI carries ``caller_is_syncadapter``
        and the provider applies its sync adapter delete semantics.
        """
        uri = c.RAW_CONTACTS_URI
        if caller_is_sync_adapter:
            uri = as_sync_adapter(uri)

        try:
            count = self.resolver.delete(uri, f"{c.ID} = ?", [str(raw_id)])
        except ProviderError as e:
            logger.error(f"Failed to remove contact {raw_id}: {e}")
            return False
        return count > 0
