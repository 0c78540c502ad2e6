"""Tests for owner_resolution/pipeline/timeline.py — owners_by_date assembly."""

import logging

from owner_resolution.pipeline.models import Person
from owner_resolution.pipeline.timeline import (
    TimelineBuilder,
    build_ownership_timeline,
    iso_date,
)


def _full_names(owners):
    return [f"{o.first_name} {o.last_name}" if isinstance(o, Person) else o.name for o in owners]


# ═══════════════════════════════════════════════════
# 1. Dated sales and current owners
# ═══════════════════════════════════════════════════

class TestDatedSales:

    def test_sale_and_current_same_owner(self):
        timeline = build_ownership_timeline(
            ["SMITH JOHN"],
            [{"date": "2020-01-05", "grantor": None, "grantee": "SMITH JOHN"}],
        )
        assert list(timeline.owners_by_date) == ["2020-01-05", "current"]
        assert timeline.owners_by_date["2020-01-05"] == timeline.owners_by_date["current"]
        assert _full_names(timeline.current) == ["John Smith"]

    def test_dates_ascending_unknown_first_current_last(self, sales_basic):
        timeline = build_ownership_timeline(["ROE RICHARD & ANN"], sales_basic)
        assert list(timeline.owners_by_date) == [
            "unknown_date_1", "2015-03-01", "2020-01-05", "current",
        ]
        assert _full_names(timeline.owners_by_date["unknown_date_1"]) == ["Jane Doe"]
        assert _full_names(timeline.owners_by_date["2015-03-01"]) == ["John Smith"]
        assert _full_names(timeline.owners_by_date["2020-01-05"]) == ["Richard Roe", "Ann Roe"]

    def test_current_always_present(self):
        timeline = build_ownership_timeline(None, [])
        assert timeline.to_dict() == {"owners_by_date": {"current": []}, "invalid_owners": []}

    def test_date_without_valid_owner_skipped(self):
        timeline = build_ownership_timeline(
            [], [{"date": "2019-01-01", "grantor": None, "grantee": "ET AL"}],
        )
        assert "2019-01-01" not in timeline.owners_by_date
        assert [e.reason for e in timeline.invalid_owners] == ["contains_et_al"]

    def test_same_date_rows_merged_and_deduped(self):
        timeline = build_ownership_timeline([], [
            {"date": "2018-06-01", "grantor": None, "grantee": "SMITH JOHN"},
            {"date": "2018-06-01", "grantor": None, "grantee": "SMITH JOHN & JANE"},
        ])
        assert _full_names(timeline.owners_by_date["2018-06-01"]) == ["John Smith", "Jane Smith"]

    def test_grantee_list(self):
        timeline = build_ownership_timeline([], [
            {"date": "2018-06-01", "grantee": ["SMITH JOHN", "ACME LLC"]},
        ])
        assert _full_names(timeline.owners_by_date["2018-06-01"]) == ["John Smith", "Acme Llc"]


# ═══════════════════════════════════════════════════
# 2. Unknown-date buckets
# ═══════════════════════════════════════════════════

class TestUnknownBuckets:

    def test_grantor_seen_as_grantee_not_bucketed(self, sales_basic):
        timeline = build_ownership_timeline([], sales_basic)
        unknown = [o for k, v in timeline.owners_by_date.items() if k.startswith("unknown") for o in v]
        assert "John Smith" not in _full_names(unknown)

    def test_one_bucket_per_row_without_repeats(self):
        timeline = build_ownership_timeline([], [
            {"date": "2010-01-01", "grantor": "DOE JANE", "grantee": "SMITH JOHN"},
            {"date": "2012-01-01", "grantor": "DOE JANE & POE EDGAR", "grantee": "ROE ANN"},
        ])
        assert _full_names(timeline.owners_by_date["unknown_date_1"]) == ["Jane Doe"]
        assert _full_names(timeline.owners_by_date["unknown_date_2"]) == ["Edgar Poe"]

    def test_undated_rows(self, caplog):
        with caplog.at_level(logging.WARNING, logger="owner_resolution.pipeline.timeline"):
            timeline = build_ownership_timeline([], [
                {"date": None, "grantor": None, "grantee": "ROE RICHARD"},
                {"date": "01/05/2020", "grantor": None, "grantee": "POE EDGAR"},
            ])
        assert _full_names(timeline.owners_by_date["unknown_date_1"]) == ["Richard Roe"]
        assert _full_names(timeline.owners_by_date["unknown_date_2"]) == ["Edgar Poe"]
        assert "no usable date" in caplog.text


# ═══════════════════════════════════════════════════
# 3. Invalid owners and logging
# ═══════════════════════════════════════════════════

class TestInvalidOwners:

    def test_deduped_across_stages(self):
        timeline = build_ownership_timeline(
            ["JOHN & JANE"],
            [{"date": "2020-01-05", "grantor": "JOHN & JANE", "grantee": "SMITH JOHN"}],
        )
        assert [e.to_dict() for e in timeline.invalid_owners] == [
            {"raw": "JOHN & JANE", "reason": "ambiguous_joint_owner_string"},
        ]

    def test_summary_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="owner_resolution.pipeline.timeline"):
            TimelineBuilder().build(["SMITH JOHN"], [])
        assert "Timeline built" in caplog.text


class TestIsoDate:

    def test_valid(self):
        assert iso_date("2020-01-05") == "2020-01-05"

    def test_impossible_day(self):
        assert iso_date("2020-02-30") is None

    def test_other_formats(self):
        assert iso_date("01/05/2020") is None
        assert iso_date(None) is None
