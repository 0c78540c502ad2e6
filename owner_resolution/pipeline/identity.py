"""Owner identity keys and deduplication.

Two owner records are the same owner when their identity keys match:

  Person  → "person|" + prefix, first, middle, last, suffix
  Company → "company|" + name

Keys are lower-cased with whitespace collapsed, so "John  SMITH" and
"john smith" collapse together.  Identity here is per parcel only; nothing
tries to decide whether two parcels share an owner.

When a duplicate turns up, the first-seen record stays in place and picks up
whatever the later one knows that it does not (mailing address, interest,
optional name parts).  A known value is never replaced by a missing one.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Iterable

from owner_resolution.config import TRACE_ENABLED
from owner_resolution.pipeline.models import Company, InvalidOwnerEntry, Owner, Person
from owner_resolution.pipeline.utils import collapse_whitespace

logger = logging.getLogger(__name__)

_PERSON_KEY_FIELDS = ("prefix_name", "first_name", "middle_name", "last_name", "suffix_name")
_ENRICHABLE = ("mailing_address", "prefix_name", "suffix_name", "middle_name", "ownership_interest")


def _trace(msg: str):
    if TRACE_ENABLED:
        logger.debug(f"[TRACE] {msg}")


def identity_key(owner: Owner) -> str:
    """Case-insensitive equality key for one owner record."""
    if isinstance(owner, Person):
        parts = [getattr(owner, f) or "" for f in _PERSON_KEY_FIELDS]
        return "person|" + collapse_whitespace(" ".join(parts)).lower()
    if isinstance(owner, Company):
        return "company|" + collapse_whitespace(owner.name).lower()
    raise TypeError(f"Not an owner record: {type(owner).__name__}")


def merge_owner(existing: Owner, incoming: Owner) -> Owner:
    """Return a copy of *existing* with its empty fields filled from *incoming*."""
    own = {f.name for f in fields(existing)}
    updates = {
        name: getattr(incoming, name)
        for name in _ENRICHABLE
        if name in own
        and getattr(existing, name, None) is None
        and getattr(incoming, name, None) is not None
    }
    if not updates:
        return existing
    _trace(f"merged {sorted(updates)} into {identity_key(existing)}")
    return replace(existing, **updates)


def dedupe_owners(owners: Iterable[Owner]) -> list[Owner]:
    """Collapse duplicates by identity key, keeping first-seen order.

    Input records are never mutated; merged entries are fresh copies.
    """
    merged: dict[str, Owner] = {}
    for owner in owners:
        key = identity_key(owner)
        if key in merged:
            merged[key] = merge_owner(merged[key], owner)
        else:
            merged[key] = owner
    return list(merged.values())


def dedupe_invalid(entries: Iterable[InvalidOwnerEntry]) -> list[InvalidOwnerEntry]:
    """Drop repeated ``(raw, reason)`` pairs, keeping first-seen order."""
    seen: set[tuple[str, str]] = set()
    out = []
    for entry in entries:
        key = (entry.raw, entry.reason)
        if key not in seen:
            seen.add(key)
            out.append(entry)
    return out
