"""Owner resolver - one raw owner cell in, structured owners out.

Stages, in order, for each raw string:

  1. normalize_owner_text         whitespace, asides, aliases, noise
  2. group_owner_segments         company runs and person runs (classify_owner)
  3. strip_legal_designations     TRUSTEE, LIFE ESTATE, HUSBAND AND WIFE, ... on people
  4. split_composite              "SMITH JOHN & JANE" → two candidates
  5. extract_interest             "1/2 INT" per candidate, carried forward
  6. parse_person_name            Person or a rejection reason
  7. dedupe_owners                within the cell

Every rejection becomes an ``InvalidOwnerEntry`` on the resolver instance;
one bad fragment never blocks its siblings.  A resolver instance holds the
state for one parcel, so use a fresh one per parcel.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from owner_resolution.config import DEFAULT_NAME_ORDER, TRACE_ENABLED
from owner_resolution.pipeline.designations import strip_legal_designations
from owner_resolution.pipeline.identity import dedupe_invalid, dedupe_owners
from owner_resolution.pipeline.interest import extract_interest
from owner_resolution.pipeline.models import (
    AMBIGUOUS_JOINT_OWNER_STRING,
    CONTAINS_ET_AL,
    UNCLASSIFIABLE_OWNER,
    UNPARSEABLE_OR_EMPTY,
    Company,
    InvalidOwnerEntry,
    NameOrder,
    Owner,
    OwnerKind,
)
from owner_resolution.pipeline.names import parse_person_name
from owner_resolution.pipeline.splitter import (
    group_owner_segments,
    is_ambiguous_joint,
    split_composite,
)
from owner_resolution.pipeline.utils import (
    collapse_whitespace,
    format_company_name,
    has_letters,
    normalize_owner_text,
)
from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY, ET_AL_PATTERN, Vocabulary

logger = logging.getLogger(__name__)

_ET_AL_RE = re.compile(ET_AL_PATTERN, re.IGNORECASE)


def _trace(msg: str):
    if TRACE_ENABLED:
        logger.debug(f"[TRACE] {msg}")


class OwnerResolver:
    """Resolves owner strings for one parcel and collects the rejects."""

    def __init__(
        self,
        vocab: Vocabulary = DEFAULT_VOCABULARY,
        name_order: NameOrder | str | None = None,
    ):
        self.vocab = vocab
        self.name_order = NameOrder(name_order or DEFAULT_NAME_ORDER)
        self._invalid: list[InvalidOwnerEntry] = []

    @property
    def invalid_owners(self) -> list[InvalidOwnerEntry]:
        return dedupe_invalid(self._invalid)

    def _reject(self, raw: str, reason: str, sale_date: str | None = None) -> None:
        _trace(f"invalid {raw!r}: {reason}" + (f" (sale {sale_date})" if sale_date else ""))
        self._invalid.append(InvalidOwnerEntry(raw=raw, reason=reason))

    def resolve(
        self,
        raw,
        mailing_address: str | None = None,
        sale_date: str | None = None,
    ) -> list[Owner]:
        """Resolve one raw owner cell into deduplicated owners."""
        raw_text = collapse_whitespace("" if raw is None else str(raw))
        text = normalize_owner_text(raw_text, self.vocab)

        if not text:
            reason = CONTAINS_ET_AL if _ET_AL_RE.search(raw_text) else UNPARSEABLE_OR_EMPTY
            self._reject(raw_text, reason, sale_date)
            return []
        if not has_letters(text):
            self._reject(raw_text, UNCLASSIFIABLE_OWNER, sale_date)
            return []

        groups = group_owner_segments(text, self.vocab)
        _trace(f"{raw_text!r} normalized={text!r} runs={[(g, k.value) for g, k in groups]}")

        owners: list[Owner] = []
        for group, kind in groups:
            # A rejected run is reported by its own text when the cell was cut
            label = raw_text if len(groups) == 1 else group
            if kind == OwnerKind.COMPANY:
                owners.extend(self._resolve_company(label, group, mailing_address, sale_date))
            else:
                owners.extend(self._resolve_people(label, group, mailing_address, sale_date))
        return dedupe_owners(owners)

    def _resolve_company(self, label, text, mailing_address, sale_date) -> list[Owner]:
        name = format_company_name(extract_interest(text).cleaned)
        if not name:
            self._reject(label, UNPARSEABLE_OR_EMPTY, sale_date)
            return []
        return [Company(name=name, mailing_address=mailing_address)]

    def _resolve_people(self, label, text, mailing_address, sale_date) -> list[Owner]:
        designations = strip_legal_designations(text, self.vocab)
        cleaned = designations.cleaned_name
        _trace(f"{text!r} removed={designations.designations}")
        if not has_letters(cleaned):
            # Nothing but designations ("TRUSTEE", "HEIRS")
            self._reject(label, UNPARSEABLE_OR_EMPTY, sale_date)
            return []

        candidates = split_composite(
            cleaned, self.vocab, mailing_address=mailing_address, sale_date=sale_date,
        )
        if is_ambiguous_joint(candidates, self.vocab):
            self._reject(label, AMBIGUOUS_JOINT_OWNER_STRING, sale_date)
            return []

        owners: list[Owner] = []
        interest = None
        previous_last = None
        for cand in candidates:
            extracted = extract_interest(cand.raw)
            if extracted.fraction is not None:
                interest = extracted.fraction

            segment = extracted.cleaned
            if not has_letters(segment):
                self._reject(cand.raw, UNCLASSIFIABLE_OWNER, cand.sale_date)
                interest = None
                continue

            person, reason = parse_person_name(
                replace(cand, raw=segment),
                self.vocab,
                name_order=self.name_order,
                fallback_last_name=previous_last,
            )
            if person is None:
                self._reject(cand.raw, reason, cand.sale_date)
                interest = None
                continue

            person.ownership_interest = interest
            previous_last = person.last_name
            owners.append(person)
        return owners

    def resolve_many(self, entries, sale_date: str | None = None) -> list[Owner]:
        """Resolve a list of ``str`` or ``{"name", "mailing_address"}`` entries."""
        owners: list[Owner] = []
        for raw, mailing_address in iter_owner_entries(entries):
            owners.extend(self.resolve(raw, mailing_address, sale_date))
        return dedupe_owners(owners)


def iter_owner_entries(entries):
    """Yield ``(raw, mailing_address)`` pairs from loosely shaped owner input.

    Accepts None, a single string, a dict with ``name`` (or ``raw``) and
    optional ``mailing_address``, or a list mixing any of those.
    """
    if entries is None:
        return
    if isinstance(entries, (str, dict)):
        entries = [entries]
    for entry in entries:
        if entry is None:
            continue
        if isinstance(entry, dict):
            raw = entry.get("name")
            if raw is None:
                raw = entry.get("raw")
            yield raw, entry.get("mailing_address")
        elif isinstance(entry, str):
            yield entry, None
        else:
            raise TypeError(f"Unsupported owner entry: {type(entry).__name__}")


def resolve_owner_text(
    raw,
    mailing_address: str | None = None,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
    name_order: NameOrder | str | None = None,
) -> tuple[list[Owner], list[InvalidOwnerEntry]]:
    """One-shot helper: resolve a single owner cell with a throwaway resolver."""
    resolver = OwnerResolver(vocab=vocab, name_order=name_order)
    owners = resolver.resolve(raw, mailing_address)
    return owners, resolver.invalid_owners
