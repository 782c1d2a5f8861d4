"""Search query construction: WHERE clauses, id clauses, population sets and projections."""

import logging
from collections.abc import Iterable

from pydantic import BaseModel

from contacts2android.android import contract as c
from contacts2android.android.mapping import (
    FIELD_COLUMNS,
    KIND_LAYOUTS,
    SEARCH_SCOPES,
    WILDCARD_SEARCH_FIELDS,
)

logger = logging.getLogger(__name__)

MATCH_ALL = "%"

# Every field the projector can populate
POPULATABLE_FIELDS = (
    "displayName",
    "name",
    "nickname",
    "phoneNumbers",
    "emails",
    "addresses",
    "ims",
    "organizations",
    "birthday",
    "note",
    "urls",
    "photos",
    "relations",
    "about",
)

# Columns fetched for every search regardless of the requested fields
BOOKKEEPING_COLUMNS = (
    c.CONTACT_ID,
    c.ID,
    c.DATA_ID,
    c.MIMETYPE,
    c.VERSION,
    c.DIRTY,
    c.DELETED,
    c.SOURCE_ID,
    c.SYNC1,
    c.SYNC2,
    c.SYNC3,
    c.SYNC4,
)

# Populated field -> kinds whose columns it needs
_FIELD_KINDS = {
    "displayName": (c.Kind.NAME,),
    "name": (c.Kind.NAME,),
    "nickname": (c.Kind.NICKNAME,),
    "phoneNumbers": (c.Kind.PHONE,),
    "emails": (c.Kind.EMAIL,),
    "addresses": (c.Kind.POSTAL,),
    "ims": (c.Kind.IM,),
    "organizations": (c.Kind.ORGANIZATION,),
    "birthday": (c.Kind.EVENT,),
    "note": (c.Kind.NOTE,),
    "urls": (c.Kind.WEBSITE,),
    "photos": (c.Kind.PHOTO,),
    "relations": (c.Kind.RELATION,),
    "about": (c.Kind.EVENT,),
}


class WhereOptions(BaseModel):
    """A selection string and its positional arguments."""

    where: str = ""
    where_args: list[str] | None = None


def to_search_term(filter_text: str | None) -> str:
    """Wrap a user filter for substring matching; empty means match everything."""
    if not filter_text:
        return MATCH_ALL
    return f"%{filter_text}%"


def is_wildcard_search(fields: list) -> bool:
    """True only for the single-element ``["*"]`` field list."""
    return len(fields) == 1 and fields[0] == "*"


def _field_clause(key: str, search_term: str) -> tuple[str, list[str]] | None:
    root = key.split(".", 1)[0]

    if key == "id":
        return f"({FIELD_COLUMNS['id']} = ? )", [search_term[1:-1]]

    column = FIELD_COLUMNS.get(key)
    if column is None:
        logger.warning(f"Skipping search on unsupported field: {key}")
        return None

    kind = SEARCH_SCOPES.get(root)
    if kind is None:
        return f"({column} LIKE ? )", [search_term]
    return f"({column} LIKE ? AND {c.MIMETYPE} = ? )", [search_term, kind.value]


def build_where_clause(
    fields: list,
    search_term: str,
    account_type: str | None = None,
    account_name: str | None = None,
) -> WhereOptions:
    """Build one OR-ed clause per requested field, optionally scoped to an account.

    With both account type and name, the disjunction is AND-ed with exact
    account equality. When ``search_term`` is the match-all ``"%"`` the
    account clauses replace the field clauses entirely.
    """
    where: list[str] = []
    where_args: list[str] = []

    keys = WILDCARD_SEARCH_FIELDS if is_wildcard_search(fields) else fields
    for key in keys:
        if not isinstance(key, str):
            logger.warning(f"Skipping malformed search field: {key!r}")
            continue
        clause = _field_clause(key, search_term)
        if clause is None:
            continue
        where.append(clause[0])
        where_args.extend(clause[1])

    selection = " OR ".join(where)
    if not selection and search_term != MATCH_ALL:
        return WhereOptions(where="", where_args=[])

    if account_type is not None and account_name is not None:
        if search_term == MATCH_ALL:
            # Account-only filter: field clauses are dropped on purpose
            selection = "("
            where_args = []
        else:
            selection = f"({selection}) AND ("
        selection += f"{c.ACCOUNT_TYPE} == ? ) AND ({c.ACCOUNT_NAME} == ? )"
        where_args.extend([account_type, account_name])

    return WhereOptions(where=selection, where_args=where_args)


def build_id_clause(contact_ids: Iterable[str], all_contacts: bool) -> WhereOptions:
    """Restrict the detail query to the raw contact ids found by the search."""
    if all_contacts:
        return WhereOptions(where=f"({c.ID} LIKE ? )", where_args=[MATCH_ALL])

    quoted = ",".join(f"'{contact_id}'" for contact_id in contact_ids)
    return WhereOptions(where=f"{c.ID} IN ({quoted})", where_args=None)


def build_population_set(desired_fields: list[str] | None) -> dict[str, bool]:
    """Decide which contact fields the projector should fill.

    No desired fields, or a ``"*"`` entry, means every field.
    """
    if not desired_fields or "*" in desired_fields:
        return {key: True for key in POPULATABLE_FIELDS}

    populate: dict[str, bool] = {}
    for key in desired_fields:
        if not isinstance(key, str):
            logger.warning(f"Ignoring malformed desired field: {key!r}")
            continue
        for candidate in POPULATABLE_FIELDS:
            if key.startswith(candidate):
                populate[candidate] = True
                if candidate == "name":
                    populate["displayName"] = True
                break
    return populate


def is_required(key: str, populate: dict[str, bool]) -> bool:
    return populate.get(key, False)


def build_projection(populate: dict[str, bool]) -> list[str]:
    """Columns to fetch for the requested fields, without duplicates."""
    columns = dict.fromkeys(BOOKKEEPING_COLUMNS)
    for key, kinds in _FIELD_KINDS.items():
        if not is_required(key, populate):
            continue
        for kind in kinds:
            columns.update(dict.fromkeys(KIND_LAYOUTS[kind].columns))
    return list(columns)
