"""
Tests for content fingerprints and name grouping.
"""

import json

from dedup.fingerprint import (
    duplicate_groups,
    fingerprint,
    fingerprint_groups,
    index,
    is_exact_group,
)


class TestFingerprint:
    """Test the content digest."""

    def test_absent_content_has_no_fingerprint(self):
        assert fingerprint(None) is None

    def test_empty_string_differs_from_absent(self):
        """An empty body is real content; a missing field is not."""
        assert fingerprint("") is not None
        assert fingerprint("") != fingerprint(None)

    def test_trims_whitespace(self):
        assert fingerprint("  Q3 results\n") == fingerprint("Q3 results")

    def test_is_case_sensitive(self):
        assert fingerprint("Q3 results") != fingerprint("q3 results")

    def test_digest_is_sha256_hex(self):
        digest = fingerprint("hello")
        assert len(digest) == 64
        int(digest, 16)

    def test_bytes_are_decoded(self):
        assert fingerprint("héllo".encode("utf-8")) == fingerprint("héllo")

    def test_undecodable_bytes_yield_none(self):
        """Undecodable content never raises, it just cannot match."""
        assert fingerprint(b"\xff\xfe\xfa") is None

    def test_lone_surrogate_yields_none(self):
        """json.loads happily returns strings that cannot be encoded."""
        assert fingerprint(json.loads('"broken \\ud800 text"')) is None


class TestIndex:
    """Test grouping by declared name."""

    def test_groups_by_exact_name(self, make_record):
        records = [
            make_record("1", name="a.md"),
            make_record("2", name="b.md"),
            make_record("3", name="a.md"),
        ]
        groups = index(records)
        assert [r.id for r in groups["a.md"]] == ["1", "3"]
        assert [r.id for r in groups["b.md"]] == ["2"]

    def test_names_are_not_normalized(self, make_record):
        records = [make_record("1", name="A.md"), make_record("2", name="a.md")]
        assert set(index(records)) == {"A.md", "a.md"}

    def test_unnamed_records_are_excluded(self, make_record):
        records = [
            make_record("1", name=""),
            make_record("2", name=None),
            make_record("3", name=None),
        ]
        assert index(records) == {}

    def test_preserves_input_order_within_group(self, make_record):
        records = [make_record(str(i), name="x.md") for i in (5, 1, 3)]
        assert [r.id for r in index(records)["x.md"]] == ["5", "1", "3"]

    def test_duplicate_groups_drops_singletons(self, make_record):
        records = [
            make_record("1", name="a.md"),
            make_record("2", name="b.md"),
            make_record("3", name="a.md"),
        ]
        groups = duplicate_groups(index(records))
        assert list(groups) == ["a.md"]


class TestExactGroups:
    """Test exact-copy detection inside a group."""

    def test_identical_contents(self, make_record):
        group = [make_record("1", content="same"), make_record("2", content=" same ")]
        assert is_exact_group(group)

    def test_two_empty_strings_match(self, make_record):
        group = [make_record("1", content=""), make_record("2", content="")]
        assert is_exact_group(group)

    def test_two_absent_contents_do_not_match(self, make_record):
        group = [make_record("1", content=None), make_record("2", content=None)]
        assert not is_exact_group(group)

    def test_absent_vs_empty_do_not_match(self, make_record):
        group = [make_record("1", content=None), make_record("2", content="")]
        assert not is_exact_group(group)

    def test_partial_match_is_not_exact(self, make_record):
        group = [
            make_record("1", content="same"),
            make_record("2", content="same"),
            make_record("3", content="other"),
        ]
        assert not is_exact_group(group)

    def test_fingerprint_groups_skip_absent_content(self, make_record):
        group = [
            make_record("1", content="same"),
            make_record("2", content=None),
            make_record("3", content="same"),
        ]
        by_hash = fingerprint_groups(group)
        assert len(by_hash) == 1
        assert [r.id for r in by_hash[fingerprint("same")]] == ["1", "3"]
