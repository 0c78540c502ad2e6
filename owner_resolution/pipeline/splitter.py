"""Composite splitter - breaks one owner cell into single-owner candidates.

Splits on ``&``, ``AND``, ``/``, ``;`` and ``+``.  Three things look like
separators but are not, and are masked before splitting:

  - an ampersand inside one token ("AT&T")
  - an ``N/D`` interest fraction ("1/2")
  - a designation phrase containing a conjunction ("HUSBAND AND WIFE")

A cell naming both people and companies ("SMITH JOHN & ACME LLC") is first
cut into company and person runs; a company name that itself holds a
conjunction ("SMITH & SONS LLC") stays whole.

Shared surnames are handed to the fragments that lack one:

  "SMITH, JOHN & JANE"   → JANE inherits SMITH from the comma segment
  "JOHN & JANE SMITH"    → JOHN inherits SMITH from the trailing segment,
                           which is then read first-name-first
"""

from __future__ import annotations

import logging
import re

from owner_resolution.config import TRACE_ENABLED
from owner_resolution.pipeline.classifier import classify_owner, names_trustees
from owner_resolution.pipeline.models import NameOrder, OwnerKind, RawOwnerCandidate
from owner_resolution.pipeline.utils import (
    collapse_whitespace,
    contains_token,
    join_surname_tokens,
    token_key,
    tokenize_name,
)
from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"\s*(?:&|/|;|\+)\s*|\s+AND\s+", re.IGNORECASE)
_IN_TOKEN_AMP_RE = re.compile(r"(?<=[A-Za-z0-9])&(?=[A-Za-z0-9])")
_FRACTION_RE = re.compile(r"\d+\s*/\s*\d+")
_PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")

_INTEREST_TOKENS = frozenset({"INT", "INTEREST"})


def _trace(msg: str):
    if TRACE_ENABLED:
        logger.debug(f"[TRACE] {msg}")


# ═══════════════════════════════════════════════════
# 1. MASKING
# ═══════════════════════════════════════════════════

def _mask(text: str, vocab: Vocabulary) -> tuple[str, list[str]]:
    """Replace protected spans with numbered placeholders."""
    saved: list[str] = []

    def _stash(m: re.Match) -> str:
        saved.append(m.group(0))
        return f"\x00{len(saved) - 1}\x00"

    s = vocab.joined_designation_re.sub(_stash, text)
    s = _FRACTION_RE.sub(_stash, s)
    s = _IN_TOKEN_AMP_RE.sub(_stash, s)
    return s, saved


def _unmask(text: str, saved: list[str]) -> str:
    return _PLACEHOLDER_RE.sub(lambda m: saved[int(m.group(1))], text)


def _pieces(masked: str, saved: list[str]) -> list[tuple[str, int, int]]:
    """Non-empty segments of a masked cell with their masked offsets."""
    bounds, start = [], 0
    for m in _SEPARATOR_RE.finditer(masked):
        bounds.append((start, m.start()))
        start = m.end()
    bounds.append((start, len(masked)))
    pieces = []
    for s, e in bounds:
        seg = collapse_whitespace(_unmask(masked[s:e], saved)).strip(" ,")
        if seg:
            pieces.append((seg, s, e))
    return pieces


# ═══════════════════════════════════════════════════
# 2. NAME TOKENS
# ═══════════════════════════════════════════════════

def name_tokens(segment: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> list[str]:
    """Tokens of a segment that can carry a name.

    Drops honorifics, generational suffixes and INT/INTEREST labels, but
    never empties a non-empty segment on their account.
    """
    tokens = [t for t in tokenize_name(segment) if token_key(t) not in _INTEREST_TOKENS]
    while len(tokens) > 1 and vocab.prefix_for(tokens[0]):
        tokens = tokens[1:]
    while len(tokens) > 1 and vocab.suffix_for(tokens[-1]):
        tokens = tokens[:-1]
    return tokens


def _comma_surname(segment: str, vocab: Vocabulary) -> str | None:
    """Surname written before the first comma ("SMITH JR, JOHN" → "SMITH")."""
    head = segment.split(",", 1)[0]
    tokens = name_tokens(head, vocab)
    if not tokens:
        return None
    return join_surname_tokens(tokens)


def _trailing_surname(tokens: list[str], vocab: Vocabulary) -> str | None:
    """Surname of a first-name-first token list, extended back over particles."""
    if len(tokens) < 2:
        return None
    start = len(tokens) - 1
    while start - 1 >= 1 and vocab.is_particle(tokens[start - 1]):
        start -= 1
    return join_surname_tokens(tokens[start:])


def _has_surname(tokens: list[str], surname: str) -> bool:
    return contains_token(" ".join(tokens), surname)


# ═══════════════════════════════════════════════════
# 3. COMPANY / PERSON RUNS
# ═══════════════════════════════════════════════════

def group_owner_segments(
    text: str,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> list[tuple[str, OwnerKind]]:
    """Cut one owner cell into runs that are wholly company or wholly people.

    A conjunction can sit inside a company name ("SMITH & SONS LLC",
    "JOHNSON & JOHNSON INC"): bare one-word segments ahead of a company
    segment belong to it.  A trust written with its trustees stays one
    company.  Anything else is split:

      "SMITH JOHN & ACME LLC"                → people, company
      "DOE JOHN REVOCABLE TRUST & DOE JANE"  → company, people
    """
    text = collapse_whitespace(text)
    if not text:
        return []
    if classify_owner(text, vocab=vocab) != OwnerKind.COMPANY:
        return [(text, OwnerKind.PERSON)]
    if names_trustees(text):
        return [(text, OwnerKind.COMPANY)]

    masked, saved = _mask(text, vocab)
    pieces = _pieces(masked, saved)

    # [is_company, start, end] in masked offsets
    runs: list[list] = []
    pending = None
    for seg, start, end in pieces:
        if classify_owner(seg, vocab=vocab) == OwnerKind.COMPANY:
            runs.append([True, start if pending is None else pending, end])
            pending = None
        elif runs and not runs[-1][0]:
            runs[-1][2] = end
        elif len(name_tokens(seg, vocab)) <= 1:
            pending = start if pending is None else pending
        else:
            runs.append([False, start if pending is None else pending, end])
            pending = None
    if pending is not None:
        runs.append([False, pending, len(masked)])

    if len(runs) < 2:
        return [(text, OwnerKind.COMPANY)]
    groups = [
        (
            collapse_whitespace(_unmask(masked[start:end], saved)).strip(" ,"),
            OwnerKind.COMPANY if is_company else OwnerKind.PERSON,
        )
        for is_company, start, end in runs
    ]
    _trace(f"cell {text!r} grouped → {[(g, k.value) for g, k in groups]}")
    return groups


# ═══════════════════════════════════════════════════
# 4. SPLITTING
# ═══════════════════════════════════════════════════

def split_composite(
    text: str,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
    mailing_address: str | None = None,
    sale_date: str | None = None,
) -> list[RawOwnerCandidate]:
    """Split one normalized owner string into single-owner candidates.

    A cell that is one company ("SMITH AND JONES LLC") comes back whole.
    """
    text = collapse_whitespace(text)
    if not text:
        return []

    if group_owner_segments(text, vocab) == [(text, OwnerKind.COMPANY)]:
        _trace(f"composite {text!r} is a company; not split")
        return [RawOwnerCandidate(
            raw=text,
            has_comma="," in text,
            mailing_address=mailing_address,
            sale_date=sale_date,
        )]

    masked, saved = _mask(text, vocab)
    segments = [seg for seg, _, _ in _pieces(masked, saved)]

    candidates = [
        RawOwnerCandidate(
            raw=seg,
            has_comma="," in seg,
            mailing_address=mailing_address,
            sale_date=sale_date,
        )
        for seg in segments
    ]
    if len(candidates) > 1:
        _inherit_forward(candidates, vocab)
        _inherit_backward(candidates, vocab, has_comma="," in text)

    _trace(f"split {text!r} → {[c.raw for c in candidates]}")
    return candidates


def _inherit_forward(candidates: list[RawOwnerCandidate], vocab: Vocabulary) -> None:
    """Carry a "LAST, FIRST" surname onto later comma-less fragments."""
    surname = None
    for cand in candidates:
        if cand.has_comma:
            surname = _comma_surname(cand.raw, vocab)
            continue
        if not surname:
            continue
        tokens = name_tokens(cand.raw, vocab)
        if tokens and len(tokens) <= 2 and not _has_surname(tokens, surname):
            cand.inherited_last_name = surname
            cand.inherited_from_comma = True


def _inherit_backward(
    candidates: list[RawOwnerCandidate],
    vocab: Vocabulary,
    has_comma: bool,
) -> None:
    """Single given names share the trailing surname ("JOHN & JANE SMITH")."""
    if has_comma:
        return
    leading = candidates[:-1]
    if not all(len(name_tokens(c.raw, vocab)) == 1 for c in leading):
        return
    last = candidates[-1]
    surname = _trailing_surname(name_tokens(last.raw, vocab), vocab)
    if not surname:
        return
    last.name_order = NameOrder.FIRST_LAST
    for cand in leading:
        cand.inherited_last_name = surname
        cand.name_order = NameOrder.FIRST_LAST


def is_ambiguous_joint(
    candidates: list[RawOwnerCandidate],
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> bool:
    """True for "JOHN & JANE": several one-word fragments and no surname anywhere."""
    if len(candidates) < 2:
        return False
    return all(
        len(name_tokens(c.raw, vocab)) <= 1 and not c.inherited_last_name and not c.has_comma
        for c in candidates
    )
