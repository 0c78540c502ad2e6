"""Records produced by the owner resolution pipeline.

``Person`` and ``Company`` are separate dataclasses forming the ``Owner``
union; callers dispatch with ``isinstance``.  ``to_dict()`` emits the
persisted owner shape (``type`` discriminant plus nullable name fields).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class OwnerKind(str, Enum):
    COMPANY = "company"
    PERSON = "person"
    UNCLASSIFIED = "unclassified"


class NameOrder(str, Enum):
    LAST_FIRST = "last_first"    # assessor rolls: "SMITH JOHN M"
    FIRST_LAST = "first_last"    # deeds / mixed case: "John M Smith"


# Closed reason vocabulary for InvalidOwnerEntry
UNPARSEABLE_OR_EMPTY = "unparseable_or_empty"
PERSON_MISSING_FIRST_NAME = "person_missing_first_name"
PERSON_MISSING_LAST_NAME = "person_missing_last_name"
AMBIGUOUS_JOINT_OWNER_STRING = "ambiguous_joint_owner_string"
CONTAINS_ET_AL = "contains_et_al"
UNCLASSIFIABLE_OWNER = "unclassifiable_owner"

REASON_CODES = frozenset({
    UNPARSEABLE_OR_EMPTY,
    PERSON_MISSING_FIRST_NAME,
    PERSON_MISSING_LAST_NAME,
    AMBIGUOUS_JOINT_OWNER_STRING,
    CONTAINS_ET_AL,
    UNCLASSIFIABLE_OWNER,
})


# ═══════════════════════════════════════════════════
# OWNERS
# ═══════════════════════════════════════════════════

@dataclass(frozen=True)
class Fraction:
    """Fractional ownership interest parsed from one ``N/D`` match."""
    numerator: int
    denominator: int
    decimal: float
    percentage: float

    @property
    def text(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    def to_dict(self) -> dict:
        return {
            "numerator": self.numerator,
            "denominator": self.denominator,
            "decimal": self.decimal,
            "percentage": self.percentage,
        }


@dataclass
class Person:
    first_name: str
    last_name: str
    middle_name: str | None = None
    prefix_name: str | None = None
    suffix_name: str | None = None
    ownership_interest: Fraction | None = None
    mailing_address: str | None = None

    def to_dict(self) -> dict:
        d = {
            "type": OwnerKind.PERSON.value,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "middle_name": self.middle_name,
            "prefix_name": self.prefix_name,
            "suffix_name": self.suffix_name,
            "mailing_address": self.mailing_address,
        }
        if self.ownership_interest is not None:
            d["ownership_interest_fraction"] = self.ownership_interest.text
            d["ownership_interest_decimal"] = self.ownership_interest.decimal
            d["ownership_interest_percentage"] = self.ownership_interest.percentage
        return d


@dataclass
class Company:
    name: str
    mailing_address: str | None = None

    def to_dict(self) -> dict:
        return {
            "type": OwnerKind.COMPANY.value,
            "name": self.name,
            "mailing_address": self.mailing_address,
        }


Owner = Union[Person, Company]


# ═══════════════════════════════════════════════════
# INTERMEDIATE / ERROR RECORDS
# ═══════════════════════════════════════════════════

@dataclass
class RawOwnerCandidate:
    """One pre-split fragment believed to denote a single owner."""
    raw: str
    has_comma: bool = False
    inherited_last_name: str | None = None
    inherited_from_comma: bool = False   # surname came from a "LAST, FIRST" sibling
    name_order: NameOrder | None = None  # overrides the resolver default
    mailing_address: str | None = None
    sale_date: str | None = None


@dataclass(frozen=True)
class InvalidOwnerEntry:
    raw: str
    reason: str

    def __post_init__(self):
        if self.reason not in REASON_CODES:
            raise ValueError(f"Unknown invalid-owner reason: {self.reason!r}")

    def to_dict(self) -> dict:
        return {"raw": self.raw, "reason": self.reason}


@dataclass
class OwnershipTimeline:
    """Date-keyed owner lists for one parcel plus every rejected candidate.

    ``owners_by_date`` keeps insertion order: ``unknown_date_N`` buckets,
    ISO dates ascending, then ``current``.
    """
    owners_by_date: dict[str, list[Owner]] = field(default_factory=dict)
    invalid_owners: list[InvalidOwnerEntry] = field(default_factory=list)

    @property
    def current(self) -> list[Owner]:
        return self.owners_by_date.get("current", [])

    def to_dict(self) -> dict:
        return {
            "owners_by_date": {
                key: [o.to_dict() for o in owners]
                for key, owners in self.owners_by_date.items()
            },
            "invalid_owners": [e.to_dict() for e in self.invalid_owners],
        }
