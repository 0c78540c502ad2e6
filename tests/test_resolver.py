"""Tests for owner_resolution/pipeline/resolver.py — one owner cell end to end.

Covers:
  - Reference scenarios (comma names, shared surnames, companies, interest, ET AL)
  - Rejection reasons
  - Interest propagation within a composite
  - Per-resolver invalid collection
"""

import logging

import pytest

from owner_resolution.pipeline.models import Company, Person
from owner_resolution.pipeline.resolver import (
    OwnerResolver,
    iter_owner_entries,
    resolve_owner_text,
)


def _names(owners):
    return [(o.first_name, o.last_name) for o in owners]


# ═══════════════════════════════════════════════════
# 1. Reference scenarios
# ═══════════════════════════════════════════════════

class TestScenarios:

    def test_comma_name_with_suffix(self):
        owners, invalid = resolve_owner_text("SMITH, JOHN M JR")
        assert invalid == []
        (p,) = owners
        assert isinstance(p, Person)
        assert (p.first_name, p.middle_name, p.last_name, p.suffix_name) == ("John", "M", "Smith", "Jr.")

    def test_shared_trailing_surname(self):
        owners, invalid = resolve_owner_text("JOHN & JANE SMITH")
        assert invalid == []
        assert _names(owners) == [("John", "Smith"), ("Jane", "Smith")]

    def test_company(self):
        owners, invalid = resolve_owner_text("ACME HOLDINGS LLC")
        assert invalid == []
        assert owners == [Company(name="Acme Holdings Llc")]

    def test_interest(self):
        owners, _ = resolve_owner_text("DOE JOHN 1/2 INT")
        (p,) = owners
        assert (p.first_name, p.last_name) == ("John", "Doe")
        d = p.to_dict()
        assert d["ownership_interest_fraction"] == "1/2"
        assert d["ownership_interest_decimal"] == 0.5
        assert d["ownership_interest_percentage"] == 50.0

    def test_et_al_only(self):
        owners, invalid = resolve_owner_text("ET AL")
        assert owners == []
        assert [e.to_dict() for e in invalid] == [{"raw": "ET AL", "reason": "contains_et_al"}]


# ═══════════════════════════════════════════════════
# 2. Composite shapes
# ═══════════════════════════════════════════════════

class TestComposites:

    def test_last_first_shared_surname(self):
        owners, _ = resolve_owner_text("SMITH JOHN & JANE")
        assert _names(owners) == [("John", "Smith"), ("Jane", "Smith")]

    def test_comma_shared_surname(self):
        owners, _ = resolve_owner_text("SMITH, JOHN & JANE")
        assert _names(owners) == [("John", "Smith"), ("Jane", "Smith")]

    def test_first_last_setting(self):
        owners, _ = resolve_owner_text("JOHN SMITH AND JANE DOE", name_order="first_last")
        assert _names(owners) == [("John", "Smith"), ("Jane", "Doe")]

    def test_designations_removed_from_names(self):
        owners, _ = resolve_owner_text("SMITH JOHN TRUSTEE")
        assert _names(owners) == [("John", "Smith")]

    def test_marital_designation_not_split(self):
        owners, invalid = resolve_owner_text("JONES BOB & MARY HUSBAND AND WIFE")
        assert _names(owners) == [("Bob", "Jones"), ("Mary", "Jones")]
        assert invalid == []

    def test_trust_kept_whole(self):
        owners, _ = resolve_owner_text("SMITH FAMILY TRUST")
        assert owners == [Company(name="Smith Family Trust")]

    def test_mixed_case(self):
        owners, _ = resolve_owner_text("John Smith")
        assert _names(owners) == [("John", "Smith")]

    def test_duplicates_collapsed(self):
        owners, _ = resolve_owner_text("SMITH JOHN & SMITH JOHN")
        assert len(owners) == 1

    def test_mailing_address_on_every_owner(self):
        owners, _ = resolve_owner_text("SMITH JOHN & JANE", mailing_address="1 MAIN ST")
        assert [o.mailing_address for o in owners] == ["1 MAIN ST", "1 MAIN ST"]

    def test_et_al_with_names(self):
        owners, invalid = resolve_owner_text("SMITH JOHN ET AL")
        assert _names(owners) == [("John", "Smith")]
        assert invalid == []


# ═══════════════════════════════════════════════════
# 3. Interest propagation
# ═══════════════════════════════════════════════════

class TestInterestPropagation:

    def test_carried_forward_until_new_fraction(self):
        owners, _ = resolve_owner_text("DOE JOHN 1/2 & DOE JANE & ROE RICHARD 1/4")
        assert [o.ownership_interest.text for o in owners] == ["1/2", "1/2", "1/4"]

    def test_reset_by_invalid_candidate(self):
        owners, invalid = resolve_owner_text("DOE JOHN 1/2 & 999 & DOE JANE")
        assert [o.ownership_interest for o in owners][1] is None
        assert owners[0].ownership_interest.text == "1/2"
        assert [(e.raw, e.reason) for e in invalid] == [("999", "unclassifiable_owner")]

    def test_no_fraction(self):
        owners, _ = resolve_owner_text("DOE JOHN")
        assert owners[0].ownership_interest is None
        assert "ownership_interest_fraction" not in owners[0].to_dict()


# ═══════════════════════════════════════════════════
# 4. Rejections
# ═══════════════════════════════════════════════════

class TestRejections:

    @pytest.mark.parametrize("raw,reason", [
        ("", "unparseable_or_empty"),
        ("   ", "unparseable_or_empty"),
        ("12345", "unclassifiable_owner"),
        ("JOHN & JANE", "ambiguous_joint_owner_string"),
        ("MR SMITH", "person_missing_first_name"),
        ("JANE", "person_missing_last_name"),
        ("TRUSTEE", "unparseable_or_empty"),
        ("ET AL.", "contains_et_al"),
    ])
    def test_reason(self, raw, reason):
        owners, invalid = resolve_owner_text(raw)
        assert owners == []
        assert [e.reason for e in invalid] == [reason]

    def test_none_input(self):
        owners, invalid = resolve_owner_text(None)
        assert owners == []
        assert invalid[0].reason == "unparseable_or_empty"

    def test_bad_fragment_does_not_block_siblings(self):
        owners, invalid = resolve_owner_text("SMITH JOHN & 42 & DOE JANE")
        assert _names(owners) == [("John", "Smith"), ("Jane", "Doe")]
        assert invalid[0].raw == "42"


# ═══════════════════════════════════════════════════
# 5. Resolver instance state
# ═══════════════════════════════════════════════════

class TestOwnerResolver:

    def test_invalid_collected_and_deduped(self, resolver):
        resolver.resolve("ET AL")
        resolver.resolve("ET AL")
        resolver.resolve("JANE")
        assert [(e.raw, e.reason) for e in resolver.invalid_owners] == [
            ("ET AL", "contains_et_al"),
            ("JANE", "person_missing_last_name"),
        ]

    def test_resolve_many_mixed_entries(self, resolver):
        owners = resolver.resolve_many([
            "SMITH JOHN",
            {"name": "ACME LLC", "mailing_address": "PO BOX 9"},
            {"name": "SMITH JOHN", "mailing_address": "1 MAIN ST"},
        ])
        assert len(owners) == 2
        assert owners[0].mailing_address == "1 MAIN ST"
        assert owners[1] == Company(name="Acme Llc", mailing_address="PO BOX 9")

    def test_separate_resolvers_do_not_share_state(self):
        a, b = OwnerResolver(), OwnerResolver()
        a.resolve("ET AL")
        assert b.invalid_owners == []

    def test_invalid_name_order(self):
        with pytest.raises(ValueError):
            OwnerResolver(name_order="middle_out")


class TestIterOwnerEntries:

    def test_shapes(self):
        assert list(iter_owner_entries("SMITH JOHN")) == [("SMITH JOHN", None)]
        assert list(iter_owner_entries({"raw": "X", "mailing_address": "Y"})) == [("X", "Y")]
        assert list(iter_owner_entries(None)) == []
        assert list(iter_owner_entries([None, "A"])) == [("A", None)]

    def test_bad_entry(self):
        with pytest.raises(TypeError):
            list(iter_owner_entries([42]))


# ═══════════════════════════════════════════════════
# 6. Cells mixing people and companies
# ═══════════════════════════════════════════════════

class TestMixedCells:

    def test_person_then_company(self):
        owners, invalid = resolve_owner_text("SMITH JOHN & ACME LLC")
        assert invalid == []
        assert owners == [Person("John", "Smith"), Company(name="Acme Llc")]

    def test_trust_then_person(self):
        owners, invalid = resolve_owner_text("DOE JOHN REVOCABLE TRUST & DOE JANE")
        assert invalid == []
        assert owners == [Company(name="Doe John Revocable Trust"), Person("Jane", "Doe")]

    @pytest.mark.parametrize("raw,name", [
        ("SMITH & SONS LLC", "Smith & Sons Llc"),
        ("JOHNSON & JOHNSON INC", "Johnson & Johnson Inc"),
        ("SMITH AND JONES LLC", "Smith And Jones Llc"),
    ])
    def test_conjunction_inside_company_name(self, raw, name):
        owners, _ = resolve_owner_text(raw)
        assert owners == [Company(name=name)]

    def test_trustees_named_with_trust_kept_whole(self):
        owners, _ = resolve_owner_text("SMITH JOHN & JANE TRUSTEES OF SMITH FAMILY TRUST")
        assert owners == [Company(name="Smith John & Jane Trustees Of Smith Family Trust")]

    def test_people_share_surname_beside_company(self):
        owners, _ = resolve_owner_text("SMITH JOHN & JANE & ACME LLC")
        assert owners == [Person("John", "Smith"), Person("Jane", "Smith"), Company(name="Acme Llc")]

    def test_rejected_run_reported_by_its_text(self):
        owners, invalid = resolve_owner_text("ACME LLC & JANE")
        assert owners == [Company(name="Acme Llc")]
        assert [(e.raw, e.reason) for e in invalid] == [("JANE", "person_missing_last_name")]


class TestGivenNameFirst:

    def test_trustee_capacity(self):
        owners, _ = resolve_owner_text("JOHN DOE TRUSTEE")
        assert _names(owners) == [("John", "Doe")]

    def test_each_fragment(self):
        owners, _ = resolve_owner_text("JOHN SMITH & JANE DOE")
        assert _names(owners) == [("John", "Smith"), ("Jane", "Doe")]

    def test_care_of_addressee_dropped(self):
        owners, _ = resolve_owner_text("SMITH JOHN C/O JONES MARY")
        assert owners == [Person("John", "Smith")]


class TestSaleDateContext:

    def test_rejections_traced_with_sale_date(self, monkeypatch, caplog):
        monkeypatch.setattr("owner_resolution.pipeline.resolver.TRACE_ENABLED", True)
        with caplog.at_level(logging.DEBUG, logger="owner_resolution.pipeline.resolver"):
            OwnerResolver().resolve_many(["SMITH JOHN & 42"], sale_date="2019-01-01")
        assert "'42': unclassifiable_owner (sale 2019-01-01)" in caplog.text

    def test_candidates_carry_sale_date(self, monkeypatch):
        import owner_resolution.pipeline.resolver as resolver_module
        seen = []
        real_split = resolver_module.split_composite

        def _spy(*args, **kwargs):
            candidates = real_split(*args, **kwargs)
            seen.extend(c.sale_date for c in candidates)
            return candidates

        monkeypatch.setattr(resolver_module, "split_composite", _spy)
        OwnerResolver().resolve("SMITH JOHN & JANE", sale_date="2019-01-01")
        assert seen == ["2019-01-01", "2019-01-01"]
