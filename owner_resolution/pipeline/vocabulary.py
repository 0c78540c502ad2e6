"""Lookup tables for owner-name resolution.

Every keyword list the resolver consults lives here as plain data:
  - Company keywords (entity suffixes, institutions, government bodies)
  - Honorific prefixes and generational/professional suffixes, with the
    canonical spelling emitted in ``prefix_name`` / ``suffix_name``
  - Surname particles that glue onto the following token ("VAN DYKE")
  - Legal designations (fiduciary, estate, tenancy and marital qualifiers)
  - Noise phrases deleted outright during normalization
  - Common given names, used to spot first-name-first rows

A ``Vocabulary`` bundles the tables with the regexes compiled from them.
Counties with local vocabulary call ``DEFAULT_VOCABULARY.extend(...)`` and
pass the result down; the control flow in the pipeline never changes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from functools import cached_property
from types import MappingProxyType
from typing import Iterable, Mapping

from owner_resolution.config import EXTRA_COMPANY_KEYWORDS


# ═══════════════════════════════════════════════════
# 1. COMPANY KEYWORDS
# ═══════════════════════════════════════════════════

COMPANY_KEYWORDS = frozenset({
    # entity suffixes
    "INC", "INCORPORATED", "LLC", "L.L.C", "LTD", "LIMITED", "CORP",
    "CORPORATION", "CO", "COMPANY", "LP", "L.P", "LLP", "PLLC", "PLC", "PC",
    "P.C", "PA", "P.A", "N.A", "LLLP",
    # trusts and funds
    "TRUST", "FUND", "FOUNDATION", "REIT",
    # commercial
    "HOLDINGS", "GROUP", "PARTNERS", "PARTNERSHIP", "ASSOCIATES",
    "PROPERTIES", "PROPERTY OWNERS", "REALTY", "MANAGEMENT", "INVESTMENTS",
    "INVESTMENT", "INVESTORS", "ENTERPRISES", "INDUSTRIES", "SERVICES",
    "SOLUTIONS", "CAPITAL", "VENTURES", "DEVELOPMENT", "DEVELOPERS",
    "BUILDERS", "HOMES", "CONSTRUCTION", "EQUITIES", "ALLIANCE",
    # finance
    "BANK", "BANCORP", "SAVINGS", "MORTGAGE", "CREDIT UNION", "FINANCIAL",
    "LENDING", "FEDERAL", "NATIONAL ASSOCIATION",
    # community and institutions
    "ASSOCIATION", "ASSN", "HOA", "HOMEOWNERS", "CONDOMINIUM", "CONDO",
    "CLUB", "SOCIETY", "INSTITUTE", "CENTER", "COUNCIL", "CHURCH",
    "MINISTRIES", "MINISTRY", "TEMPLE", "CONGREGATION", "DIOCESE", "SCHOOL",
    "ACADEMY", "UNIVERSITY", "COLLEGE", "HOSPITAL", "MEDICAL", "LIBRARY",
    "MUSEUM",
    # government
    "COUNTY", "CITY OF", "TOWN OF", "VILLAGE OF", "STATE OF", "UNITED STATES",
    "USA", "DISTRICT", "AUTHORITY", "BOARD", "COMMISSION", "AGENCY",
    "DEPARTMENT", "DEPT", "COMMISSIONERS", "TRUSTEES OF THE INTERNAL IMPROVEMENT",
})


# ═══════════════════════════════════════════════════
# 2. PREFIXES / SUFFIXES / PARTICLES
# ═══════════════════════════════════════════════════

# Keys are upper-case with periods removed; values are the emitted spelling.
NAME_PREFIXES = {
    "MR": "Mr.", "MRS": "Mrs.", "MS": "Ms.", "MISS": "Miss", "MX": "Mx.",
    "DR": "Dr.", "DOCTOR": "Dr.", "PROF": "Prof.", "PROFESSOR": "Prof.",
    "REV": "Rev.", "REVEREND": "Rev.", "FR": "Fr.", "FATHER": "Fr.",
    "BR": "Br.", "BROTHER": "Br.", "SISTER": "Sr.",
    "CAPT": "Capt.", "CAPTAIN": "Capt.", "COL": "Col.", "COLONEL": "Col.",
    "MAJ": "Maj.", "MAJOR": "Maj.", "LT": "Lt.", "LIEUTENANT": "Lt.",
    "SGT": "Sgt.", "SERGEANT": "Sgt.", "HON": "Hon.", "HONORABLE": "Hon.",
    "JUDGE": "Judge", "RABBI": "Rabbi", "IMAM": "Imam", "SHEIKH": "Sheikh",
    "SIR": "Sir", "DAME": "Dame",
}

NAME_SUFFIXES = {
    "JR": "Jr.", "SR": "Sr.", "II": "II", "III": "III", "IV": "IV",
    "PHD": "PhD", "MD": "MD", "ESQ": "Esq.", "ESQUIRE": "Esq.", "JD": "JD",
    "LLM": "LLM", "MBA": "MBA", "RN": "RN", "DDS": "DDS", "DVM": "DVM",
    "CFA": "CFA", "CPA": "CPA", "PE": "PE", "PMP": "PMP",
    "EMERITUS": "Emeritus", "RET": "Ret.", "RETIRED": "Ret.",
}

SURNAME_PARTICLES = frozenset({
    "DE", "DEL", "DELA", "DELLA", "DI", "DA", "DOS", "DAS", "DU", "LA", "LE",
    "LOS", "LAS", "VAN", "VON", "DER", "DEN", "TER", "TEN", "MC", "MAC",
    "ST", "SAINT", "SAN", "SANTA", "BIN", "IBN", "ABU", "BEN", "AL", "EL",
})


# ═══════════════════════════════════════════════════
# 3. LEGAL DESIGNATIONS
# ═══════════════════════════════════════════════════

LEGAL_DESIGNATIONS = (
    # fiduciary capacity
    "TRUSTEE", "TRUSTEES", "TTEE", "TTEES", "TR", "TRS", "CO-TRUSTEE",
    "CO TRUSTEE", "CO-TRUSTEES", "SUCCESSOR TRUSTEE", "AS TRUSTEE", "TRUST",
    "EXECUTOR", "EXECUTRIX", "EXR", "ADMINISTRATOR", "ADMINISTRATRIX", "ADMR",
    "PERSONAL REPRESENTATIVE", "PERS REP", "GUARDIAN", "CUSTODIAN",
    # estates
    "LIFE ESTATE", "LIFE EST", "LIFE TENANT", "REMAINDERMAN", "REMAINDERMEN",
    "REVOCABLE", "IRREVOCABLE", "HEIRS OF", "HEIRS", "HEIR", "DECEASED",
    "DEC'D", "DECD",
    # tenancy
    "JTWROS", "JT WROS", "WROS", "WITH RIGHT OF SURVIVORSHIP",
    "JOINT TENANTS WITH RIGHT OF SURVIVORSHIP", "JOINT TENANTS",
    "JOINT TENANT", "AS JOINT TENANTS", "TENANTS IN COMMON",
    "TENANT IN COMMON", "AS TENANTS IN COMMON", "TIC",
    "TENANCY BY THE ENTIRETY", "TENANCY BY THE ENTIRETIES",
    "TENANTS BY THE ENTIRETY", "TENANTS BY ENTIRETY", "TBE", "SURVIVOR",
    "SURVIVING SPOUSE",
    # marital / descriptive
    "A SINGLE MAN", "A SINGLE WOMAN", "A SINGLE PERSON", "SINGLE MAN",
    "SINGLE WOMAN", "A MARRIED MAN", "A MARRIED WOMAN", "MARRIED MAN",
    "MARRIED WOMAN", "AN UNMARRIED MAN", "AN UNMARRIED WOMAN", "A WIDOW",
    "A WIDOWER", "WIDOW", "WIDOWER", "HUSBAND AND WIFE", "HUSBAND & WIFE",
    "WIFE AND HUSBAND", "AS HUSBAND AND WIFE", "HIS WIFE", "HER HUSBAND",
)


# ═══════════════════════════════════════════════════
# 4. NOISE
# ═══════════════════════════════════════════════════

# Regex sources, applied case-insensitively and replaced with a space.
NOISE_PATTERNS = (
    r"\bET\.?\s*AL\b\.?",
    r"\bET\.?\s*UX(?:OR)?\b\.?",
    r"\bET\.?\s*VIR\b\.?",
    r"\bH\s*&\s*W\b",
    r"\bH/W\b",
    r"\bJT\s*TEN\b",
    r"\bFBO\b",
    r"\bU/D/T\b",
    r"\bU/A\b",
    r"\b\d+(?:\.\d+)?\s*%",
    r"\b\d+(?:\.\d+)?\s*PCT\b",
)

# Everything after one of these markers is an alias, trade name or care-of addressee
ALIAS_MARKERS = (
    "F/K/A", "FKA", "A/K/A", "AKA", "N/K/A", "NKA", "D/B/A", "DBA", "C/O", "CARE OF",
)

ET_AL_PATTERN = r"\bET\.?\s*AL\b"


# ═══════════════════════════════════════════════════
# 5. GIVEN NAMES
# ═══════════════════════════════════════════════════

# Common given names on property rolls.  Names that are at least as common
# as surnames (LEE, ALLEN, MARTIN, HOWARD, ...) are left out.
GIVEN_NAMES = frozenset({
    # male
    "JOHN", "DAVID", "MICHAEL", "ROBERT", "JAMES", "WILLIAM", "RICHARD",
    "JOSEPH", "CHARLES", "CHRISTOPHER", "DANIEL", "MATTHEW", "DONALD",
    "KENNETH", "MARK", "PAUL", "STEVEN", "ANDREW", "GEORGE", "EDWARD",
    "RONALD", "TIMOTHY", "GARY", "LARRY", "JEFFREY", "FRANK", "SCOTT", "ERIC",
    "STEPHEN", "RAYMOND", "GREGORY", "SAMUEL", "BENJAMIN", "PATRICK", "JACK",
    "DENNIS", "JERRY", "CARL", "HAROLD", "DOUGLAS", "HENRY", "ARTHUR", "PETER",
    "ALBERT", "WILLIE", "WAYNE", "RALPH", "EUGENE", "ROY", "LOUIS", "PHILIP",
    "JOHNNY", "ERNEST", "CRAIG", "ALAN", "CLARENCE", "WALTER", "BRUCE",
    "KEITH", "MARVIN", "VINCENT", "GLENN", "FRED", "LEON", "DALE",
    "CLIFFORD", "CHESTER", "LLOYD", "MELVIN", "VERNON", "HERMAN", "LEROY",
    "STANLEY", "LEONARD", "NATHAN", "JOEL", "EDWIN", "DON", "JEROME", "JIM",
    "TOM", "BILL", "MIKE", "DAVE", "RICK", "BOB", "STEVE", "JEFF", "ROGER",
    "TERRY", "RANDY", "BERNARD", "NICHOLAS", "KEVIN", "BRIAN", "JOSHUA",
    "RYAN", "JACOB", "JASON", "JUSTIN", "BRANDON", "JOSE", "JUAN", "MIGUEL",
    "CARLOS", "ANTONIO", "MANUEL", "PEDRO", "FRANCISCO", "JESUS", "LUIS",
    "JORGE", "ROBERTO", "ALBERTO", "FERNANDO", "PABLO", "RICARDO", "EDUARDO",
    "JAVIER", "SERGIO", "ALEJANDRO", "ENRIQUE", "HECTOR", "RAFAEL", "RAUL",
    "VICTOR", "GABRIEL", "ALEXANDER", "ANTHONY", "LAWRENCE", "HERBERT",
    "FREDERICK", "HARVEY", "GERALD", "THEODORE", "EDGAR",
    # female
    "MARY", "PATRICIA", "LINDA", "BARBARA", "ELIZABETH", "JENNIFER", "MARIA",
    "SUSAN", "MARGARET", "DOROTHY", "LISA", "NANCY", "KAREN", "BETTY",
    "HELEN", "SANDRA", "DONNA", "CAROL", "RUTH", "SHARON", "MICHELLE",
    "LAURA", "SARAH", "KIMBERLY", "DEBORAH", "JESSICA", "SHIRLEY", "CYNTHIA",
    "ANGELA", "MELISSA", "BRENDA", "ANNA", "ANN", "ANNE", "VIRGINIA",
    "KATHLEEN", "PAMELA", "MARTHA", "DEBRA", "AMANDA", "STEPHANIE",
    "REBECCA", "CATHERINE", "CHRISTINE", "JANET", "FRANCES", "JOYCE", "DIANE",
    "ALICE", "JULIE", "HEATHER", "TERESA", "DORIS", "GLORIA", "EVELYN",
    "JEAN", "CHERYL", "MILDRED", "KATHERINE", "JOAN", "JUDITH", "ROSE",
    "JANICE", "NICOLE", "JUDY", "CHRISTINA", "KATHY", "THERESA", "BEVERLY",
    "DENISE", "TAMMY", "IRENE", "JANE", "LORI", "RACHEL", "MARILYN",
    "ANDREA", "KATHRYN", "LOUISE", "SARA", "ANNIE", "PEGGY", "CARMEN", "ROSA",
    "ANA", "JUANITA", "ELENA", "SUE", "EMILY", "VICKI", "BONNIE", "LOIS",
})


# ═══════════════════════════════════════════════════
# 6. VOCABULARY BUNDLE
# ═══════════════════════════════════════════════════

def lookup_key(token: str) -> str:
    """Key used for prefix/suffix/particle lookups: upper-case, no periods."""
    return (token or "").replace(".", "").strip().upper()


def _phrase_source(phrase: str) -> str:
    """Regex source for a keyword phrase: flexible inner whitespace and an
    optional trailing period ("INC" matches "INC." too)."""
    words = phrase.rstrip(".").split()
    return r"\s+".join(re.escape(w) for w in words) + r"\.?"


def _alternation(phrases: Iterable[str]) -> str:
    # Longest first so "LIFE ESTATE" wins over "LIFE EST"
    ordered = sorted(set(phrases), key=lambda p: (-len(p), p))
    return "|".join(_phrase_source(p) for p in ordered)


@dataclass(frozen=True, eq=False)
class Vocabulary:
    """Immutable bundle of lookup tables plus the regexes compiled from them."""

    company_keywords: frozenset = COMPANY_KEYWORDS
    name_prefixes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(NAME_PREFIXES)))
    name_suffixes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(NAME_SUFFIXES)))
    surname_particles: frozenset = SURNAME_PARTICLES
    legal_designations: tuple = LEGAL_DESIGNATIONS
    noise_patterns: tuple = NOISE_PATTERNS
    alias_markers: tuple = ALIAS_MARKERS
    given_names: frozenset = GIVEN_NAMES

    def extend(
        self,
        company_keywords: Iterable[str] = (),
        legal_designations: Iterable[str] = (),
        name_prefixes: Mapping[str, str] | None = None,
        name_suffixes: Mapping[str, str] | None = None,
        surname_particles: Iterable[str] = (),
        given_names: Iterable[str] = (),
    ) -> "Vocabulary":
        """Return a new vocabulary with extra entries merged in."""
        return replace(
            self,
            company_keywords=self.company_keywords | {k.upper() for k in company_keywords},
            legal_designations=self.legal_designations + tuple(d.upper() for d in legal_designations),
            name_prefixes=MappingProxyType({
                **self.name_prefixes,
                **{lookup_key(k): v for k, v in (name_prefixes or {}).items()},
            }),
            name_suffixes=MappingProxyType({
                **self.name_suffixes,
                **{lookup_key(k): v for k, v in (name_suffixes or {}).items()},
            }),
            surname_particles=self.surname_particles | {p.upper() for p in surname_particles},
            given_names=self.given_names | {g.upper() for g in given_names},
        )

    # ── Compiled patterns ──

    @cached_property
    def company_re(self) -> re.Pattern:
        return re.compile(
            r"(?<![A-Za-z0-9\-])(?:" + _alternation(self.company_keywords) + r")(?![A-Za-z0-9\-])",
            re.IGNORECASE,
        )

    @cached_property
    def designation_re(self) -> re.Pattern:
        return re.compile(
            r"(?<![A-Za-z'])(?:" + _alternation(self.legal_designations) + r")(?![A-Za-z'])",
            re.IGNORECASE,
        )

    @cached_property
    def joined_designation_re(self) -> re.Pattern:
        """Designations that themselves contain a conjunction ("HUSBAND AND WIFE")."""
        joined = [
            d for d in self.legal_designations
            if re.search(r"(?:\bAND\b|&|/)", d)
        ]
        if not joined:
            return re.compile(r"(?!x)x")
        return re.compile(
            r"(?<![A-Za-z])(?:" + _alternation(joined) + r")(?![A-Za-z])",
            re.IGNORECASE,
        )

    @cached_property
    def noise_re(self) -> re.Pattern:
        return re.compile("|".join(f"(?:{p})" for p in self.noise_patterns), re.IGNORECASE)

    @cached_property
    def alias_re(self) -> re.Pattern:
        markers = "|".join(re.escape(m) for m in sorted(self.alias_markers, key=len, reverse=True))
        return re.compile(r"(?<![A-Za-z])(?:" + markers + r")(?![A-Za-z]).*$", re.IGNORECASE)

    # ── Token lookups ──

    def prefix_for(self, token: str) -> str | None:
        return self.name_prefixes.get(lookup_key(token))

    def suffix_for(self, token: str) -> str | None:
        return self.name_suffixes.get(lookup_key(token))

    def is_particle(self, token: str) -> bool:
        return lookup_key(token) in self.surname_particles

    def is_given_name(self, token: str) -> bool:
        return lookup_key(token) in self.given_names


DEFAULT_VOCABULARY = Vocabulary().extend(company_keywords=EXTRA_COMPANY_KEYWORDS)
