"""Tests for folding sheet rows into desired sites."""

from __future__ import annotations

from sitesync.engines.site_reconciler import DesiredSite, fold


def _row(name="", template="", engine="", schedule="", description="", include="", exclude=""):
    return {
        "Site Name": name,
        "Scan Template ID": template,
        "Scan Engine Name": engine,
        "Scan Schedule": schedule,
        "Description": description,
        "IP Include": include,
        "IP Exclude": exclude,
    }


class TestFold:
    def test_single_row(self):
        sites = fold([_row("DMZ", template="full-audit", engine="Local", include="10.0.0.0/30")])
        assert sites == {
            "DMZ": DesiredSite(
                name="DMZ",
                template_id="full-audit",
                engine_name="Local",
                included_ranges=["10.0.0.0/30"],
            )
        }

    def test_rows_for_same_site_merge(self):
        sites = fold(
            [
                _row("DMZ", include="10.0.0.1"),
                _row("DMZ", include="10.0.0.2", exclude="10.0.0.3"),
                _row("DMZ", include="10.0.0.4"),
            ]
        )
        assert list(sites) == ["DMZ"]
        assert sites["DMZ"].included_ranges == ["10.0.0.1", "10.0.0.2", "10.0.0.4"]
        assert sites["DMZ"].excluded_ranges == ["10.0.0.3"]

    def test_scalars_from_different_rows_combine(self):
        sites = fold([_row("A", template="T1"), _row("A", engine="E1")])
        assert sites == {"A": DesiredSite(name="A", template_id="T1", engine_name="E1")}

    def test_last_non_empty_scalar_wins(self):
        sites = fold(
            [
                _row("DMZ", description="first", template="discovery"),
                _row("DMZ", description="second"),
                _row("DMZ", description=""),
            ]
        )
        assert sites["DMZ"].description == "second"
        assert sites["DMZ"].template_id == "discovery"

    def test_absent_scalars_stay_none(self):
        site = fold([_row("Lab", include="10.9.0.1")])["Lab"]
        assert site.template_id is None
        assert site.engine_name is None
        assert site.schedule_spec is None
        assert site.description is None

    def test_first_appearance_order(self):
        sites = fold([_row("B"), _row("A"), _row("B"), _row("C")])
        assert list(sites) == ["B", "A", "C"]

    def test_cells_are_trimmed(self):
        sites = fold([_row("  DMZ ", engine=" Pool-1 ", include=" 10.0.0.1 ")])
        assert sites["DMZ"].engine_name == "Pool-1"
        assert sites["DMZ"].included_ranges == ["10.0.0.1"]

    def test_whitespace_only_scalar_ignored(self):
        sites = fold([_row("DMZ", description="kept"), _row("DMZ", description="   ")])
        assert sites["DMZ"].description == "kept"

    def test_row_without_name_skipped(self):
        sites = fold([_row("", include="10.0.0.1"), _row("DMZ", include="10.0.0.2")])
        assert list(sites) == ["DMZ"]
        assert sites["DMZ"].included_ranges == ["10.0.0.2"]

    def test_missing_columns_and_none_cells(self):
        sites = fold([{"Site Name": "DMZ", "IP Include": None}])
        assert sites["DMZ"].included_ranges == []

    def test_empty_input(self):
        assert fold([]) == {}
