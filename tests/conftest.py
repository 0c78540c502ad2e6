"""Shared fixtures for the owner resolution test suite."""

import pytest

from owner_resolution.pipeline.resolver import OwnerResolver
from owner_resolution.pipeline.vocabulary import DEFAULT_VOCABULARY


# ═══════════════════════════════════════════════════
# Engine fixtures
# ═══════════════════════════════════════════════════

@pytest.fixture
def vocab():
    return DEFAULT_VOCABULARY


@pytest.fixture
def resolver():
    """Fresh resolver with the assessor-roll (last-name-first) convention."""
    return OwnerResolver(name_order="last_first")


# ═══════════════════════════════════════════════════
# Parcel fixtures (shaped like scraped appraiser pages)
# ═══════════════════════════════════════════════════

@pytest.fixture
def sales_basic():
    """Two dated sales; the first grantor never shows up as a grantee."""
    return [
        {"date": "2020-01-05", "grantor": "SMITH JOHN", "grantee": "ROE RICHARD & ANN"},
        {"date": "2015-03-01", "grantor": "DOE JANE", "grantee": "SMITH JOHN"},
    ]


@pytest.fixture
def parcel_basic(sales_basic):
    return {
        "property_id": "12345",
        "current_owners": [{"name": "ROE RICHARD & ANN", "mailing_address": "12 OAK ST"}],
        "sales": sales_basic,
    }
