"""Fractional ownership interest extraction ("DOE JOHN 1/2 INT")."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from owner_resolution.config import FRACTION_DECIMAL_PLACES, PERCENTAGE_DECIMAL_PLACES
from owner_resolution.pipeline.models import Fraction
from owner_resolution.pipeline.utils import tidy_owner_text

logger = logging.getLogger(__name__)

_FRACTION_RE = re.compile(r"(\d+)\s*/\s*(\d+)\s*(?:INT(?:EREST)?\b\.?)?", re.IGNORECASE)
_TRAILING_INT_RE = re.compile(r"(?<![A-Za-z])INT(?:EREST)?\.?\s*$", re.IGNORECASE)


@dataclass
class InterestResult:
    fraction: Fraction | None
    cleaned: str


def make_fraction(numerator: int, denominator: int) -> Fraction | None:
    """Build a Fraction with rounded decimal/percentage; None for a zero denominator."""
    if denominator == 0:
        return None
    decimal = round(numerator / denominator, FRACTION_DECIMAL_PLACES)
    percentage = round(decimal * 100, PERCENTAGE_DECIMAL_PLACES)
    return Fraction(
        numerator=numerator,
        denominator=denominator,
        decimal=decimal,
        percentage=percentage,
    )


def extract_interest(text: str) -> InterestResult:
    """Pull the first ``N/D`` (optionally ``N/D INT``) out of *text*.

    Every fraction match is cut from the returned text so digits never reach
    the name parser; only the first one becomes the interest.  A trailing
    bare INT/INTEREST left behind is cut too.
    """
    if not text:
        return InterestResult(fraction=None, cleaned="")

    m = _FRACTION_RE.search(text)
    if not m:
        return InterestResult(fraction=None, cleaned=text)

    fraction = make_fraction(int(m.group(1)), int(m.group(2)))
    if fraction is None:
        logger.debug("Ignoring zero-denominator interest %r", m.group(0))

    cleaned = _FRACTION_RE.sub(" ", text)
    cleaned = _TRAILING_INT_RE.sub("", cleaned.rstrip())
    return InterestResult(fraction=fraction, cleaned=tidy_owner_text(cleaned))
