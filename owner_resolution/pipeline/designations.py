"""Legal-designation stripping.

Deed and roll text decorates owner names with fiduciary, estate, tenancy
and marital qualifiers ("SMITH JOHN TTEE", "DOE JANE, A SINGLE WOMAN",
"JONES BOB & MARY HUSBAND AND WIFE").  These carry no name information but
matter to the classifier ("TRUSTEE" next to "TRUST" means the trust owns
the parcel), so the removed terms are handed back alongside the clean name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from owner_resolution.pipeline.utils import collapse_whitespace, tidy_owner_text
from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


@dataclass
class DesignationResult:
    cleaned_name: str
    removed_designations: list[str] | None = None

    @property
    def designations(self) -> list[str]:
        return self.removed_designations or []

    def to_dict(self) -> dict:
        return {
            "cleaned_name": self.cleaned_name,
            "removed_designations": self.removed_designations,
        }


def strip_legal_designations(
    text: str,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> DesignationResult:
    """Remove every legal designation phrase from *text*.

    The longest phrase wins at each position ("LIFE ESTATE" over "LIFE EST")
    and removal repeats until nothing matches, so phrases exposed by an
    earlier cut are caught too.  Removed terms come back upper-cased in the
    order they were cut; ``removed_designations`` is None when nothing was.
    """
    s = collapse_whitespace(text or "")
    removed: list[str] = []
    while True:
        m = vocab.designation_re.search(s)
        if not m:
            break
        removed.append(collapse_whitespace(m.group(0)).rstrip(".").upper())
        s = s[:m.start()] + " " + s[m.end():]

    cleaned = tidy_owner_text(s)
    if removed:
        logger.debug("Stripped designations %s from %r", removed, text)
    return DesignationResult(cleaned_name=cleaned, removed_designations=removed or None)
