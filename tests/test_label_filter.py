"""
LabelFilter on a single report table: path descent, result assembly, errors.
"""
from urllib.parse import quote_plus

import pytest

from reportlabel.data.schemas import ReportTable
from reportlabel.filters.label_filter import LabelFilter

from conftest import RecordingFetch, make_table


def _labels(table):
    return [row.label for row in table]


def _idx(table):
    return [row.get_metadata("label_idx") for row in table]


@pytest.fixture
def label_filter(fetch):
    return LabelFilter("Actions", "getPageUrls", request={"period": "day", "date": "2024-03-01"}, fetch=fetch)


class TestSingleLevel:
    """Labels with one part are plain lookups in the root table."""

    def test_exact_label_returns_one_tagged_row(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter(["blog"], root)
        assert _labels(result) == ["blog"]
        assert _idx(result) == [0]

    def test_single_string_is_one_label(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter("blog,docs", root)
        assert len(result) == 0
        assert _labels(label_filter.filter("blog", root)) == ["blog"]

    def test_single_part_never_loads_subtable(self, label_filter, page_tree, fetch):
        root, _ = page_tree
        label_filter.filter(["docs"], root)
        assert fetch.requests == []

    def test_surrounding_whitespace_ignored(self, label_filter, page_tree):
        root, _ = page_tree
        assert _labels(label_filter.filter(["  blog "], root)) == ["blog"]

    def test_no_fuzzy_matching(self, label_filter, page_tree):
        root, _ = page_tree
        assert len(label_filter.filter(["Blog", "blo", "index"], root)) == 0


class TestRecursiveDescent:
    """Labels joined with '>' walk down the sub-tables."""

    def test_three_levels(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter(["docs>install>index.html"], root)
        assert _labels(result) == ["index.html"]
        assert result.rows()[0].columns["nb_visits"] == 3

    def test_intermediate_miss_yields_nothing(self, label_filter, page_tree):
        root, _ = page_tree
        assert len(label_filter.filter(["docs>nope>index.html"], root)) == 0

    def test_last_part_miss_is_not_a_prefix_match(self, label_filter, page_tree):
        root, _ = page_tree
        assert len(label_filter.filter(["docs>install>missing.html"], root)) == 0

    def test_leaf_overrun_yields_nothing(self, label_filter, page_tree, fetch):
        root, _ = page_tree
        assert len(label_filter.filter(["index.html>more"], root)) == 0
        assert fetch.requests == []

    def test_missing_subtable_yields_nothing(self, page_tree):
        root, _ = page_tree
        label_filter = LabelFilter("Actions", "getPageUrls", fetch=lambda request: None)
        assert len(label_filter.filter(["docs>install"], root)) == 0

    def test_each_label_loads_its_own_path(self, label_filter, page_tree, fetch):
        root, _ = page_tree
        label_filter.filter(["docs>install>index.html", "docs>faq.html"], root)
        assert [r["idSubtable"] for r in fetch.requests] == [1, 3, 1]

    def test_encoded_separator_stays_in_label(self, label_filter, page_tree):
        root, _ = page_tree
        assert _labels(label_filter.filter([quote_plus("a>b")], root)) == ["a>b"]


class TestResultAssembly:
    """Result rows follow label order and carry label_idx."""

    def test_only_second_label_matches(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter(["missing", "blog"], root)
        assert _labels(result) == ["blog"]
        assert _idx(result) == [1]

    def test_rows_follow_label_order(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter(["index.html", "docs>faq.html", "blog"], root)
        assert _labels(result) == ["index.html", "faq.html", "blog"]
        assert _idx(result) == [0, 1, 2]

    def test_same_row_for_two_labels(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter(["blog", " blog"], root)
        assert _idx(result) == [0, 1]

    def test_source_rows_untouched(self, label_filter, page_tree):
        root, _ = page_tree
        label_filter.filter(["blog"], root)
        assert root.get_row_from_label("blog").metadata == {}
        assert len(root) == 5

    def test_result_keeps_table_metadata(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter(["blog"], root)
        assert result is not root
        assert result.metadata == {"report": "Actions.getPageUrls"}

    def test_rows_carry_stored_label_path(self, label_filter, page_tree):
        root, _ = page_tree
        result = label_filter.filter(["docs>install>index.html", " blog"], root)
        assert [r.get_metadata("label_path") for r in result] == [
            ["docs", "install", "index.html"],
            ["blog"],
        ]

    def test_subtable_rows_untouched(self, label_filter, page_tree):
        root, subtables = page_tree
        label_filter.filter(["docs>faq.html"], root)
        assert subtables[1].get_row_from_label("faq.html").metadata == {}

    def test_same_inputs_same_result(self, label_filter, page_tree):
        root, _ = page_tree
        labels = ["docs>install>index.html", "missing", "blog"]
        first = label_filter.filter(labels, root)
        second = label_filter.filter(labels, root)
        assert [(r.columns, r.metadata, r.subtable_id) for r in first] == \
               [(r.columns, r.metadata, r.subtable_id) for r in second]


class TestLabelEncodings:
    """Sanitized, raw and URL-encoded spellings of the same label."""

    def test_raw_label_matches_sanitized_storage(self, label_filter, page_tree):
        root, _ = page_tree
        assert _labels(label_filter.filter([quote_plus("a & b")], root)) == ["a &amp; b"]

    def test_already_sanitized_label_matches(self, label_filter, page_tree):
        root, _ = page_tree
        assert _labels(label_filter.filter([quote_plus("a &amp; b")], root)) == ["a &amp; b"]

    def test_unencoded_label_matches(self, label_filter, page_tree):
        root, _ = page_tree
        assert _labels(label_filter.filter(["a & b"], root)) == ["a &amp; b"]

    def test_stored_trailing_blank(self, label_filter):
        table = make_table(("tail ", 1))
        assert _labels(label_filter.filter(["tail "], table)) == ["tail "]
        assert len(label_filter.filter(["tail"], table)) == 0

    def test_sanitized_spelling_wins_over_raw(self, label_filter):
        table = make_table(("a & b", 1), ("a &amp; b", 2))
        result = label_filter.filter(["a & b"], table)
        assert _labels(result) == ["a &amp; b"]
        assert _idx(result) == [0]
        assert result.rows()[0].columns["nb_visits"] == 2

    def test_sanitized_spelling_wins_in_subtable(self):
        root = make_table(("dir", 7, 5))
        fetch = RecordingFetch({5: make_table(("a & b", 1), ("a &amp; b", 2))})
        label_filter = LabelFilter("Actions", "getPageUrls", fetch=fetch)

        result = label_filter.filter(["dir>a & b"], root)
        assert _labels(result) == ["a &amp; b"]
        assert _idx(result) == [0]
        assert result.rows()[0].columns["nb_visits"] == 2
        assert result.rows()[0].get_metadata("label_path") == ["dir", "a &amp; b"]


class TestSubtableRequests:
    """Sub-tables are fetched through a request derived from the filter's own."""

    def test_label_removed_from_subtable_request(self, page_tree, fetch):
        root, _ = page_tree
        request = {"period": "day", "date": "2024-03-01", "label": "docs>install"}
        LabelFilter("Actions", "getPageUrls", request=request, fetch=fetch).filter(["docs>install"], root)

        sent = fetch.requests[0]
        assert "label" not in sent
        assert sent["module"] == "Actions"
        assert sent["method"] == "getPageUrls"
        assert sent["idSubtable"] == 1
        assert sent["expanded"] == 0
        assert sent["date"] == "2024-03-01"
        assert request["label"] == "docs>install"

    def test_date_context_overrides_request_date(self, page_tree, fetch):
        root, _ = page_tree
        label_filter = LabelFilter("Actions", "getPageUrls", request={"date": "last3"}, fetch=fetch)
        label_filter.filter(["docs>faq.html"], root, date="2024-02-01")
        assert fetch.requests[0]["date"] == "2024-02-01"

    def test_no_fetch_callable(self, page_tree):
        root, _ = page_tree
        with pytest.raises(RuntimeError):
            LabelFilter("Actions", "getPageUrls").filter(["docs>install"], root)


class TestErrors:

    def test_unsupported_input_passes_through(self, label_filter):
        payload = {"not": "a table"}
        assert label_filter.filter(["blog"], payload) is payload
        assert label_filter.filter(["blog"], None) is None

    def test_fetch_failure_propagates(self, page_tree):
        root, _ = page_tree

        def broken_fetch(request):
            raise ConnectionError("archive unavailable")

        label_filter = LabelFilter("Actions", "getPageUrls", fetch=broken_fetch)
        with pytest.raises(ConnectionError):
            label_filter.filter(["docs>install"], root)

    def test_empty_table(self, label_filter):
        result = label_filter.filter(["blog"], ReportTable())
        assert isinstance(result, ReportTable)
        assert len(result) == 0
