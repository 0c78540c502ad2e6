"""Ownership timeline builder.

Places a parcel's owners on a date-keyed timeline:

  unknown_date_1 … N   owners we know held the parcel at some point but
                       cannot date (grantors never seen as a grantee,
                       grantees of undated sale rows)
  YYYY-MM-DD …         grantees of each dated sale, ascending
  current              owners on the current roll, always present

Every list is deduplicated by identity key; every rejected owner string
from every sale and from the current roll lands in one ``invalid_owners``
list, deduplicated by (raw, reason).
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from owner_resolution.config import TRACE_ENABLED
from owner_resolution.pipeline.identity import dedupe_owners, identity_key
from owner_resolution.pipeline.models import NameOrder, Owner, OwnershipTimeline
from owner_resolution.pipeline.resolver import OwnerResolver
from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _trace(msg: str):
    if TRACE_ENABLED:
        logger.debug(f"[TRACE] {msg}")


def iso_date(value) -> str | None:
    """Return *value* when it is a real ``YYYY-MM-DD`` date, else None."""
    if value is None:
        return None
    s = str(value).strip()
    if not _ISO_DATE_RE.match(s):
        return None
    try:
        datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        return None
    return s


def _field(row, name: str):
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


class TimelineBuilder:
    """Builds one parcel's ``OwnershipTimeline``.

    Usage::

        builder = TimelineBuilder()
        timeline = builder.build(
            current_owners=["SMITH JOHN & JANE"],
            sales=[{"date": "2020-01-05", "grantor": "DOE JANE", "grantee": "SMITH JOHN & JANE"}],
        )
        timeline.to_dict()
    """

    def __init__(
        self,
        vocab: Vocabulary = DEFAULT_VOCABULARY,
        name_order: NameOrder | str | None = None,
    ):
        self.resolver = OwnerResolver(vocab=vocab, name_order=name_order)

    def build(self, current_owners, sales) -> OwnershipTimeline:
        rows = []
        grantee_keys: set[str] = set()
        for index, row in enumerate(sales or [], start=1):
            raw_date = _field(row, "date")
            date = iso_date(raw_date)
            grantees = self.resolver.resolve_many(_field(row, "grantee"), sale_date=date)
            grantors = self.resolver.resolve_many(_field(row, "grantor"), sale_date=date)
            if date is None and grantees:
                logger.warning(
                    "Sale row %d has no usable date (%r); grantees go to an unknown-date bucket",
                    index, raw_date,
                )
            grantee_keys.update(identity_key(o) for o in grantees)
            rows.append((date, grantees, grantors))

        dated: dict[str, list[Owner]] = {}
        unknown: list[list[Owner]] = []
        placed_unknown: set[str] = set()
        for date, grantees, grantors in rows:
            if date is not None and grantees:
                dated.setdefault(date, []).extend(grantees)

            bucket: list[Owner] = []
            if date is None:
                bucket.extend(grantees)
            for owner in grantors:
                key = identity_key(owner)
                if key not in grantee_keys and key not in placed_unknown:
                    bucket.append(owner)

            bucket = [o for o in dedupe_owners(bucket) if identity_key(o) not in placed_unknown]
            if bucket:
                placed_unknown.update(identity_key(o) for o in bucket)
                unknown.append(bucket)

        owners_by_date: dict[str, list[Owner]] = {}
        for n, bucket in enumerate(unknown, start=1):
            owners_by_date[f"unknown_date_{n}"] = bucket
        for date in sorted(dated):
            owners_by_date[date] = dedupe_owners(dated[date])
        owners_by_date["current"] = self.resolver.resolve_many(current_owners)

        timeline = OwnershipTimeline(
            owners_by_date=owners_by_date,
            invalid_owners=self.resolver.invalid_owners,
        )
        logger.info(
            "Timeline built: %d dated sale(s), %d unknown bucket(s), %d current owner(s), %d invalid",
            len(dated), len(unknown), len(timeline.current), len(timeline.invalid_owners),
        )
        _trace(f"timeline keys {list(owners_by_date)}")
        return timeline


def build_ownership_timeline(
    current_owners,
    sales,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
    name_order: NameOrder | str | None = None,
) -> OwnershipTimeline:
    """Resolve a parcel's current owners and sale history into a timeline."""
    return TimelineBuilder(vocab=vocab, name_order=name_order).build(current_owners, sales)
