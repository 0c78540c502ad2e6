"""Person name parser.

Turns one single-owner fragment into a ``Person`` or a rejection reason.

Accepted shapes:
  "SMITH, JOHN M JR"     comma form: surname before the first comma
  "SMITH JOHN M"         space form, last-name-first (assessor rolls)
  "John M. Smith"        space form, first-name-first (mixed case, deeds)
  "JOHN M SMITH"         space form, first-name-first (leads with a known given name)
  "JANE" + inherited     surname supplied by a sibling fragment

Honorifics and suffixes are peeled off the ends and emitted in canonical
spelling ("MR" → "Mr.", "JR" → "Jr.").  Every field is filtered, title-cased
and pattern-checked; a Person without both a first and a last name is
never produced.
"""

from __future__ import annotations

import logging

from owner_resolution.config import DEFAULT_NAME_ORDER, TRACE_ENABLED
from owner_resolution.pipeline.models import (
    PERSON_MISSING_FIRST_NAME,
    PERSON_MISSING_LAST_NAME,
    UNPARSEABLE_OR_EMPTY,
    NameOrder,
    Person,
    RawOwnerCandidate,
)
from owner_resolution.pipeline.utils import (
    format_name_field,
    join_surname_tokens,
    token_key,
    tokenize_name,
)
from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


def _trace(msg: str):
    if TRACE_ENABLED:
        logger.debug(f"[TRACE] {msg}")


# ── Prefix / suffix peeling ──

def _pop_prefixes(tokens: list[str], vocab: Vocabulary) -> tuple[str | None, list[str]]:
    found = []
    while len(tokens) > 1 and vocab.prefix_for(tokens[0]):
        found.append(vocab.prefix_for(tokens[0]))
        tokens = tokens[1:]
    return (found[0] if found else None), tokens


def _pop_suffixes(tokens: list[str], vocab: Vocabulary) -> tuple[str | None, list[str]]:
    found = []
    while len(tokens) > 1 and vocab.suffix_for(tokens[-1]):
        found.insert(0, vocab.suffix_for(tokens[-1]))
        tokens = tokens[:-1]
    return (" ".join(found) if found else None), tokens


def _is_upper(text: str) -> bool:
    letters = [ch for ch in text if ch.isalpha()]
    return bool(letters) and all(ch.isupper() for ch in letters)


# ── Surname placement ──

def _split_last_first(tokens: list[str], vocab: Vocabulary) -> tuple[list[str], list[str]]:
    """Surname first, leading particles included: DE LA CRUZ JUAN."""
    end = 0
    while end < len(tokens) - 2 and vocab.is_particle(tokens[end]):
        end += 1
    return tokens[:end + 1], tokens[end + 1:]


def _split_first_last(tokens: list[str], vocab: Vocabulary) -> tuple[list[str], list[str]]:
    """Surname last, extended back over particles: Juan de la Cruz."""
    start = len(tokens) - 1
    while start - 1 >= 1 and vocab.is_particle(tokens[start - 1]):
        start -= 1
    return tokens[start:], tokens[:start]


def _reads_given_name_first(tokens: list[str], vocab: Vocabulary) -> bool:
    """True for "JOHN DOE": a known given name, then a word that is not one."""
    if len(tokens) < 2 or len(tokens[-1]) < 2:
        return False
    return vocab.is_given_name(tokens[0]) and not vocab.is_given_name(tokens[1])


def _resolve_order(
    candidate: RawOwnerCandidate,
    tokens: list[str],
    text: str,
    name_order: NameOrder | str | None,
    vocab: Vocabulary,
) -> NameOrder:
    if candidate.name_order is not None:
        return NameOrder(candidate.name_order)
    order = NameOrder(name_order or DEFAULT_NAME_ORDER)
    if order == NameOrder.LAST_FIRST:
        # Mixed-case text comes from deed indexes, which write names first-name-first
        if not _is_upper(text):
            return NameOrder.FIRST_LAST
        if _reads_given_name_first(tokens, vocab):
            _trace(f"{text!r} starts with a given name; reading first-name-first")
            return NameOrder.FIRST_LAST
    return order


# ── Parsing ──

def parse_person_name(
    candidate: RawOwnerCandidate,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
    name_order: NameOrder | str | None = None,
    fallback_last_name: str | None = None,
) -> tuple[Person | None, str | None]:
    """Parse *candidate* into a Person.

    Returns ``(person, None)`` on success or ``(None, reason)`` where reason is
    one of the person_missing_* / unparseable_or_empty codes.

    *fallback_last_name* is the surname of the previous owner in the same
    composite; it is only used for one-word fragments ("SMITH JOHN & JANE").
    """
    text = candidate.raw or ""
    if "," in text:
        parts = _parse_comma_form(text, vocab)
    else:
        parts = _parse_space_form(candidate, text, vocab, name_order, fallback_last_name)
    if isinstance(parts, str):
        _trace(f"{text!r} rejected: {parts}")
        return None, parts

    prefix, first, middle, last, suffix = parts
    first_name = format_name_field(first)
    last_name = format_name_field(last)
    if not last_name:
        _trace(f"{text!r} rejected: last name {last!r} invalid")
        return None, PERSON_MISSING_LAST_NAME
    if not first_name:
        _trace(f"{text!r} rejected: first name {first!r} invalid")
        return None, PERSON_MISSING_FIRST_NAME

    person = Person(
        first_name=first_name,
        last_name=last_name,
        middle_name=format_name_field(middle) if middle else None,
        prefix_name=prefix,
        suffix_name=suffix,
        mailing_address=candidate.mailing_address,
    )
    _trace(f"{text!r} → {person.to_dict()}")
    return person, None


def _parse_comma_form(text: str, vocab: Vocabulary):
    """Split SMITH JR, MR JOHN M into prefix, first, middle, last, suffix (or a reason)."""
    surname_part, given_part = text.split(",", 1)
    surname_tokens = tokenize_name(surname_part)
    given_tokens = tokenize_name(given_part.replace(",", " "))

    prefix, surname_tokens = _pop_prefixes(surname_tokens, vocab)
    surname_suffix, surname_tokens = _pop_suffixes(surname_tokens, vocab)
    given_prefix, given_tokens = _pop_prefixes(given_tokens, vocab)
    suffix, given_tokens = _pop_suffixes(given_tokens, vocab)
    prefix = prefix or given_prefix
    suffix = suffix or surname_suffix

    # "SMITH, JR" leaves the suffix as the only given token
    if len(given_tokens) == 1 and vocab.suffix_for(given_tokens[0]):
        suffix = suffix or vocab.suffix_for(given_tokens[0])
        given_tokens = []

    if not surname_tokens:
        return PERSON_MISSING_LAST_NAME
    if not given_tokens:
        return PERSON_MISSING_FIRST_NAME
    middle = " ".join(given_tokens[1:]) or None
    return prefix, given_tokens[0], middle, join_surname_tokens(surname_tokens), suffix


def _parse_space_form(
    candidate: RawOwnerCandidate,
    text: str,
    vocab: Vocabulary,
    name_order: NameOrder | str | None,
    fallback_last_name: str | None,
):
    tokens = tokenize_name(text)
    if not tokens:
        return UNPARSEABLE_OR_EMPTY
    prefix, tokens = _pop_prefixes(tokens, vocab)
    suffix, tokens = _pop_suffixes(tokens, vocab)

    inherited = candidate.inherited_last_name
    if inherited and candidate.inherited_from_comma and len(tokens) <= 2:
        if not any(token_key(t) == token_key(inherited) for t in tokens):
            middle = tokens[1] if len(tokens) == 2 else None
            return prefix, tokens[0], middle, inherited, suffix

    if len(tokens) == 1:
        surname = inherited or fallback_last_name
        if surname and token_key(tokens[0]) != token_key(surname):
            return prefix, tokens[0], None, surname, suffix
        if prefix:
            # "MR SMITH": the lone token is a surname
            return PERSON_MISSING_FIRST_NAME
        return PERSON_MISSING_LAST_NAME

    order = _resolve_order(candidate, tokens, text, name_order, vocab)
    if order == NameOrder.LAST_FIRST:
        last_tokens, given = _split_last_first(tokens, vocab)
    else:
        last_tokens, given = _split_first_last(tokens, vocab)
    middle = " ".join(given[1:]) or None
    return prefix, given[0], middle, join_surname_tokens(last_tokens), suffix
