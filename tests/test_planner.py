"""
Tests for resolution planning.
"""

import random

from dedup import plan
from dedup.base import Decision
from dedup.fingerprint import fingerprint
from dedup.planner import DryRunPlan, ExecutablePlan, build_plan


def _decisions(resolution_plan):
    return {a.document_id: a.decision for a in resolution_plan}


class TestScenarios:
    """End-to-end planning scenarios."""

    def test_identical_copies(self, make_record, now):
        records = [
            make_record("1", content="Q3 results"),
            make_record("2", content="Q3 results"),
        ]
        result = plan(records, now=now)

        assert len(result.keeps) == 1
        assert len(result.deletes) == 1
        delete = result.deletes[0]
        assert "Identical content" in delete.reason
        assert delete.exact_match

    def test_similar_content_uses_ranking(self, make_record, now):
        records = [
            make_record("1", content="quarterly results were strong"),
            make_record("2", content="quarterly results were strong overall"),
        ]
        result = plan(records, now=now)

        assert _decisions(result) == {"2": Decision.KEEP, "1": Decision.DELETE}
        reason = result.deletes[0].reason
        assert reason.startswith("Duplicate (kept better version 2)")
        assert "review recommended" in reason
        assert "Identical content" not in reason
        assert not result.deletes[0].exact_match

    def test_different_content_still_resolved(self, make_record, now):
        """Same-name documents are resolved regardless of similarity."""
        records = [
            make_record("1", content="apples"),
            make_record("2", content="oranges"),
        ]
        result = plan(records, now=now)

        assert _decisions(result) == {"2": Decision.KEEP, "1": Decision.DELETE}
        reason = result.deletes[0].reason
        assert "0.0% content similarity" in reason
        assert "review recommended" not in reason

    def test_no_shared_names(self, make_record, now):
        records = [make_record("1", name="a.md"), make_record("2", name="b.md")]
        assert len(plan(records, now=now)) == 0

    def test_tie_keeps_lower_id(self, make_record, now):
        records = [
            make_record("doc-b", content="x" * 1000),
            make_record("doc-a", content="y" * 1000),
            make_record("doc-c", content="z" * 500),
        ]
        result = plan(records, now=now)

        assert [a.score for a in result] == [10.0, 10.0, 5.0]
        assert _decisions(result) == {
            "doc-a": Decision.KEEP,
            "doc-b": Decision.DELETE,
            "doc-c": Decision.DELETE,
        }


class TestProperties:
    """Invariants every plan must satisfy."""

    def _records(self, make_record, now):
        return [
            make_record("1", name="a.md", content="alpha beta gamma"),
            make_record("2", name="a.md", content="alpha beta gamma"),
            make_record("3", name="b.md", content="one two three", uploaded_at=now.isoformat()),
            make_record("4", name="b.md", content="four five six seven"),
            make_record("5", name="b.md", content=None),
            make_record("6", name="c.md", content="lonely"),
            make_record("7", name="", content="alpha beta gamma"),
        ]

    def test_deterministic(self, make_record, now):
        records = self._records(make_record, now)
        assert plan(records, now=now) == plan(records, now=now)

    def test_input_order_does_not_matter(self, make_record, now):
        records = self._records(make_record, now)
        shuffled = list(records)
        random.Random(7).shuffle(shuffled)
        assert plan(records, now=now).actions == plan(shuffled, now=now).actions

    def test_one_keep_per_group(self, make_record, now):
        result = plan(self._records(make_record, now), now=now)
        for key in result.group_keys:
            keeps = [a for a in result.keeps if a.group_key == key]
            assert len(keeps) == 1
        assert result.group_keys == ["a.md", "b.md"]

    def test_replanning_after_execution_deletes_nothing(self, make_record, now):
        records = self._records(make_record, now)
        first = plan(records, now=now)
        deleted = {a.document_id for a in first.deletes}
        remaining = [r for r in records if r.id not in deleted]

        assert plan(remaining, now=now).deletes == []

    def test_exact_copies_never_both_kept(self, make_record, now):
        records = self._records(make_record, now)
        result = plan(records, now=now)
        kept = {a.document_id for a in result.keeps}
        for a in records:
            for b in records:
                if a.id >= b.id or a.name != b.name or not a.name:
                    continue
                fa, fb = fingerprint(a.content), fingerprint(b.content)
                if fa is not None and fa == fb:
                    assert not (a.id in kept and b.id in kept)

    def test_no_cross_group_deletion(self, make_record, now):
        records = self._records(make_record, now)
        by_id = {r.id: r for r in records}
        for action in plan(records, now=now):
            assert action.group_key == by_id[action.document_id].name

    def test_unnamed_and_singletons_untouched(self, make_record, now):
        planned = {a.document_id for a in plan(self._records(make_record, now), now=now)}
        assert "6" not in planned
        assert "7" not in planned


class TestPlanKinds:
    """Dry-run versus executable plans."""

    def test_dry_run_is_default(self, make_record, now):
        records = [make_record("1"), make_record("2")]
        assert isinstance(plan(records, now=now), DryRunPlan)
        assert plan(records, now=now).dry_run

    def test_opt_in_executable(self, make_record, now):
        records = [make_record("1"), make_record("2")]
        result = plan(records, dry_run=False, now=now)
        assert isinstance(result, ExecutablePlan)
        assert not result.dry_run

    def test_same_actions_either_way(self, make_record, now):
        records = [make_record("1", content="a b c long"), make_record("2")]
        assert plan(records, now=now).actions == plan(records, dry_run=False, now=now).actions

    def test_exact_only_keeps_kind_and_exact_groups(self, make_record, now):
        records = [
            make_record("1", name="a.md", content="same words here"),
            make_record("2", name="a.md", content="same words here"),
            make_record("3", name="b.md", content="first body"),
            make_record("4", name="b.md", content="second body"),
        ]
        live = plan(records, dry_run=False, now=now)
        safe = live.exact_only()

        assert isinstance(safe, ExecutablePlan)
        assert safe.group_keys == ["a.md"]
        assert len(safe.keeps) == 1
        assert all(a.exact_match for a in safe.deletes)
        assert isinstance(plan(records, now=now).exact_only(), DryRunPlan)

    def test_to_dict(self, make_record, now):
        records = [make_record("1"), make_record("2")]
        data = plan(records, now=now).to_dict()
        assert data["dry_run"] is True
        assert data["groups"] == 1
        assert data["keep_count"] == 1
        assert data["delete_count"] == 1
        assert data["actions"][1]["decision"] == "delete"


class TestReasons:
    """Reason texts for heuristic deletions."""

    def test_partial_copy_is_noted(self, make_record, now):
        records = [
            make_record("a", content="same text body"),
            make_record("b", content="same text body"),
            make_record("c", content="other"),
        ]
        result = plan(records, now=now)
        reasons = {a.document_id: a.reason for a in result.deletes}

        assert _decisions(result)["a"] is Decision.KEEP
        assert "content identical to kept version" in reasons["b"]
        assert reasons["b"].startswith("Duplicate (kept better version a)")
        assert "content similarity" in reasons["c"]

    def test_absent_contents_are_heuristic(self, make_record, now):
        records = [make_record("1", content=None), make_record("2", content=None)]
        result = plan(records, now=now)
        assert not result.deletes[0].exact_match
        assert result.deletes[0].reason.startswith("Duplicate (kept better version 1)")

    def test_build_plan_skips_small_groups(self, make_record, now):
        groups = {"a.md": [make_record("1", name="a.md")], "": [make_record("2"), make_record("3")]}
        assert len(build_plan(groups, now=now)) == 0
