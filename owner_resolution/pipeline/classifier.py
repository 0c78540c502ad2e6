"""Entity classifier - decides whether an owner string names a company or a person.

Keyword driven.  The rules run in a fixed precedence so fiduciary wording
resolves the same way every time:

  1. No letters at all                          → UNCLASSIFIED
  2. "TRUSTEE FOR ..."                          → COMPANY
  3. TRUST together with TRUSTEE / TTEE          → COMPANY
  4. "ESTATE OF ..."                            → COMPANY
  5. A standalone TRUST                         → COMPANY
  6. Company keyword outside any designation    → COMPANY
  7. Anything else                              → PERSON

A lone "TRUSTEE" is a capacity of a person ("SMITH JOHN TRUSTEE"), while
"SMITH FAMILY TRUST" is the trust itself.  Keywords sitting inside a legal
designation ("CO TRUSTEE", "PERS REP") do not count in rule 6.
"""

import logging
import re
from typing import Iterable

from owner_resolution.config import TRACE_ENABLED
from owner_resolution.pipeline.models import OwnerKind
from owner_resolution.pipeline.utils import has_letters
from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

_TRUSTEE_FOR_RE = re.compile(r"\bTRUSTEE\s+FOR\b", re.IGNORECASE)
_ESTATE_OF_RE = re.compile(r"\bESTATE\s+OF\b", re.IGNORECASE)
_TRUST_RE = re.compile(r"\bTRUST\b", re.IGNORECASE)
_TRUSTEE_RE = re.compile(r"\b(?:TRUSTEES?|TTEES?)\b", re.IGNORECASE)

_TRUSTEE_TERMS = frozenset({"TRUSTEE", "TRUSTEES", "TTEE", "TTEES"})


def _trace(msg: str):
    if TRACE_ENABLED:
        logger.debug(f"[TRACE] {msg}")


def _has_company_keyword(text: str, vocab: Vocabulary) -> bool:
    """True when a company keyword matches outside every designation span."""
    spans = [m.span() for m in vocab.designation_re.finditer(text)]
    for m in vocab.company_re.finditer(text):
        start, end = m.span()
        if not any(s <= start and end <= e for s, e in spans):
            _trace(f"company keyword {m.group(0)!r} in {text!r}")
            return True
    return False


def names_trustees(text: str, designations: Iterable[str] | None = None) -> bool:
    """True for "TRUSTEE FOR ..." or a TRUST written together with its trustees."""
    if _TRUSTEE_FOR_RE.search(text):
        return True
    removed = {d.upper() for d in (designations or ())}
    has_trust = bool(_TRUST_RE.search(text)) or "TRUST" in removed
    has_trustee = bool(_TRUSTEE_RE.search(text)) or bool(removed & _TRUSTEE_TERMS)
    return has_trust and has_trustee


def classify_owner(
    text: str,
    designations: Iterable[str] | None = None,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> OwnerKind:
    """Classify one owner string (or one composite) as COMPANY / PERSON / UNCLASSIFIED.

    *designations* are the terms already cut by the designation stripper;
    they let rule 3 see a TRUSTEE that no longer appears in *text*.
    """
    if not has_letters(text):
        return OwnerKind.UNCLASSIFIED

    if names_trustees(text, designations):
        _trace(f"{text!r} → COMPANY (trustee for, or trust with trustee)")
        return OwnerKind.COMPANY

    if _ESTATE_OF_RE.search(text):
        _trace(f"{text!r} → COMPANY (estate of)")
        return OwnerKind.COMPANY

    if _TRUST_RE.search(text):
        _trace(f"{text!r} → COMPANY (trust)")
        return OwnerKind.COMPANY

    if _has_company_keyword(text, vocab):
        return OwnerKind.COMPANY

    return OwnerKind.PERSON
