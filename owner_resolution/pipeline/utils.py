"""Shared text utilities for owner resolution.

Consolidates the string handling every stage relies on:
  - Owner-text normalization (whitespace, asides, aliases, noise phrases)
  - Name tokenization and token keys
  - Name-field cleanup: character filter, title casing, final pattern check
  - Company display-name cleanup
"""

import re
import logging

from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════
# 1. OWNER TEXT NORMALIZATION
# ═══════════════════════════════════════════════════

_WS_RE = re.compile(r"\s+")
_ASIDE_RE = re.compile(r"\([^)]*\)|\[[^\]]*\]")
_INT_RE = re.compile(r"(?<![A-Za-z])INT(?:EREST)?\b\.?", re.IGNORECASE)
_FRACTION_TAIL_RE = re.compile(r"\d+\s*/\s*\d+$")
_SPACE_BEFORE_COMMA_RE = re.compile(r"\s+,")
_REPEATED_COMMA_RE = re.compile(r",{2,}")
_LEADING_CONJ_RE = re.compile(r"^(?:[&/;+]\s*|AND\s+)", re.IGNORECASE)
_TRAILING_CONJ_RE = re.compile(r"(?:\s*[&/;+]|\s+AND)$", re.IGNORECASE)
_COMMA_BEFORE_CONJ_RE = re.compile(r",\s*(?=(?:[&;+]|AND\b))", re.IGNORECASE)
_DOUBLE_CONJ_RE = re.compile(r"(?:&|;|\+|\bAND\b)(?:\s*(?:&|;|\+|\bAND\b))+", re.IGNORECASE)
_EDGE_PUNCT = "-',. "


def collapse_whitespace(s: str) -> str:
    """Collapse runs of whitespace (including NBSP and newlines) to one space."""
    if not s:
        return ""
    return _WS_RE.sub(" ", s.replace("\u00a0", " ")).strip()


def _drop_bare_interest(s: str) -> str:
    """Remove INT/INTEREST unless it labels a preceding N/D fraction."""
    def _replacer(m: re.Match) -> str:
        if _FRACTION_TAIL_RE.search(s[:m.start()].rstrip()):
            return m.group(0)
        return " "
    return _INT_RE.sub(_replacer, s)


def tidy_owner_text(s: str) -> str:
    """Clean up the debris left after phrases are cut out of an owner string:
    stray commas, doubled or dangling conjunctions, edge punctuation."""
    s = collapse_whitespace(s)
    s = _SPACE_BEFORE_COMMA_RE.sub(",", s)
    s = _REPEATED_COMMA_RE.sub(",", s)
    s = _COMMA_BEFORE_CONJ_RE.sub(" ", s)
    s = _DOUBLE_CONJ_RE.sub("&", s)
    s = _LEADING_CONJ_RE.sub("", s)
    s = _TRAILING_CONJ_RE.sub("", s)
    return collapse_whitespace(s).strip(_EDGE_PUNCT)


def _normalize_once(s: str, vocab: Vocabulary) -> str:
    s = collapse_whitespace(s)
    s = _ASIDE_RE.sub(" ", s)
    s = vocab.alias_re.sub(" ", s)
    s = vocab.noise_re.sub(" ", s)
    s = _drop_bare_interest(s)
    return tidy_owner_text(s)


def normalize_owner_text(raw, vocab: Vocabulary = DEFAULT_VOCABULARY) -> str:
    """Clean one scraped owner cell into a single-line string.

    Examples:
      "SMITH JOHN\\n& JANE  ET AL"        → "SMITH JOHN & JANE"
      "DOE JANE (DECEASED) H/W"          → "DOE JANE"
      "ROE RICHARD 1/2 INT"              → "ROE RICHARD 1/2 INT"
      "ROE RICHARD INT"                  → "ROE RICHARD"
      "ACME LLC F/K/A ACME INC"          → "ACME LLC"

    Runs to a fixed point, so normalizing a normalized string is a no-op.
    """
    if raw is None:
        return ""
    s = str(raw)
    while True:
        cleaned = _normalize_once(s, vocab)
        if cleaned == s:
            return cleaned
        s = cleaned


def has_letters(s: str) -> bool:
    return bool(s) and any(ch.isalpha() and ch.isascii() for ch in s)


# ═══════════════════════════════════════════════════
# 2. NAME TOKENS
# ═══════════════════════════════════════════════════

_TOKEN_STRIP_RE = re.compile(r"[^A-Za-z'\- ]+")


def tokenize_name(segment: str) -> list[str]:
    """Split a name segment into word tokens.

    Periods become token breaks ("J.R. SMITH" → ["J", "R", "SMITH"]); digits
    and symbols other than hyphen and apostrophe are dropped.
    """
    if not segment:
        return []
    s = segment.replace("\u2019", "'").replace(".", " ")
    s = _O_APOS_RE.sub("O'", s)
    s = _TOKEN_STRIP_RE.sub(" ", s)
    return [t.strip("-'") for t in s.split() if t.strip("-'")]


def token_key(token: str) -> str:
    """Letters-only upper-case form used to compare name tokens."""
    return re.sub(r"[^A-Z]", "", (token or "").upper())


def contains_token(text: str, token: str) -> bool:
    """Whole-word, case-insensitive containment check."""
    if not text or not token:
        return False
    return re.search(r"(?<![A-Za-z])" + re.escape(token) + r"(?![A-Za-z])", text, re.IGNORECASE) is not None


# ═══════════════════════════════════════════════════
# 3. NAME FIELD FORMATTING
# ═══════════════════════════════════════════════════

_NAME_CHAR_RE = re.compile(r"[^A-Za-z\-', .]")
NAME_FIELD_RE = re.compile(r"^[A-Z][a-z]*([ \-',.][A-Za-z][a-z]*)*$")
_MC_RE = re.compile(r"\bMC\s+(?=[A-Z])", re.IGNORECASE)
_O_APOS_RE = re.compile(r"\bO'\s+(?=[A-Z])", re.IGNORECASE)


def clean_name_chars(raw: str) -> str:
    """Keep letters, space, hyphen, apostrophe, comma and period; trim edges."""
    s = _ASIDE_RE.sub("", collapse_whitespace(raw))
    s = _NAME_CHAR_RE.sub("", s)
    s = collapse_whitespace(s)
    return s.strip(_EDGE_PUNCT)


def title_case_name(s: str) -> str:
    """Title-case a name: upper after start, space, hyphen, apostrophe, period.

    "O'NEIL-SMITH" → "O'Neil-Smith", "MCDONALD" → "Mcdonald".
    """
    out = []
    boundary = True
    for ch in s.lower():
        if ch.isalpha():
            out.append(ch.upper() if boundary else ch)
            boundary = False
        else:
            out.append(ch)
            boundary = ch in " -'.,"
    return "".join(out)


def join_surname_tokens(tokens: list[str]) -> str:
    """Join surname tokens, gluing split "MC DONALD" / "O' NEIL" forms."""
    s = " ".join(tokens).strip()
    s = _MC_RE.sub(lambda m: m.group(0).rstrip(), s)
    s = _O_APOS_RE.sub("O'", s)
    return s


def format_name_field(raw: str | None) -> str | None:
    """Character filter → title case → pattern check; None when invalid."""
    if not raw:
        return None
    cleaned = clean_name_chars(raw)
    if not cleaned:
        return None
    value = title_case_name(cleaned)
    if not NAME_FIELD_RE.match(value):
        logger.debug("Discarding malformed name field %r", raw)
        return None
    return value


# ═══════════════════════════════════════════════════
# 4. COMPANY NAMES
# ═══════════════════════════════════════════════════

def format_company_name(raw: str) -> str:
    """Display form of a company owner.

    "ACME  HOLDINGS LLC ," → "Acme Holdings Llc"
    """
    s = _ASIDE_RE.sub(" ", collapse_whitespace(raw))
    s = collapse_whitespace(s)
    s = re.sub(r"\s+,", ",", s)
    s = re.sub(r",\s*", ", ", s)
    s = s.strip().rstrip(",;").strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in s.split())
