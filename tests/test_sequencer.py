import json
import logging
from pathlib import Path

import pytest

from fnr import (
    AlwaysDecide, ApplyMode, Decision, DecisionSource, DestinationCollision, InvalidNewName,
    Match, RenameFailed, ScriptedDecisions, apply_plan, order_matches, plan_batch, rename_one
)
from fnr.safety_checks import check_new_name


def m(path, new_name=None, is_dir=False):
    path = Path(path)
    return Match(path=path, new_name=new_name or path.name, is_dir=is_dir)


def is_ancestor(parent, child):
    if not parent.is_dir:
        return False
    parent_parts = parent.path.parts
    return child.path.parts[:len(parent_parts)] == parent_parts and child.path != parent.path


class TestOrdering:
    def test_files_before_directories(self):
        batch = [m("a", "b", is_dir=True), m("x.txt", "y.txt"), m("a/c.txt", "d.txt")]
        ordered = order_matches(batch)
        assert [o.is_dir for o in ordered] == [False, False, True]

    def test_files_keep_discovery_order(self):
        batch = [m("z/deep/f1"), m("f2"), m("z/f3")]
        assert [o.path for o in order_matches(batch)] == [Path("z/deep/f1"), Path("f2"), Path("z/f3")]

    def test_directories_deepest_first(self):
        batch = [m("a", is_dir=True), m("a/b/c", is_dir=True), m("a/b", is_dir=True), m("x", is_dir=True)]
        ordered = [o.path for o in order_matches(batch)]
        assert ordered == [Path("a/b/c"), Path("a/b"), Path("a"), Path("x")]

    def test_descendants_precede_ancestors(self):
        batch = [
            m("top", is_dir=True),
            m("top/mid", is_dir=True),
            m("top/mid/leaf.txt"),
            m("top/other", is_dir=True),
            m("top/mid/low", is_dir=True),
            m("side.txt"),
        ]
        ordered = order_matches(batch)
        position = {o.path: i for i, o in enumerate(ordered)}
        for parent in batch:
            for child in batch:
                if is_ancestor(parent, child):
                    assert position[child.path] < position[parent.path]

    def test_is_ancestor(self):
        assert is_ancestor(m("a", is_dir=True), m("a/b"))
        assert not is_ancestor(m("a", is_dir=True), m("ab/c"))
        assert not is_ancestor(m("a", is_dir=True), m("a", is_dir=True))
        assert not is_ancestor(m("a"), m("a/b"))


class TestPlan:
    def test_check_new_name(self):
        assert check_new_name("ok.txt") == (True, None)
        assert check_new_name("a/b")[0] is False
        assert check_new_name("")[0] is False
        assert check_new_name("..")[0] is False

    def test_rejects_separator_in_new_name(self):
        plan = plan_batch([m("a.txt", "sub/a.txt"), m("b.txt", "c.txt")], case_insensitive=False)
        assert [o.path for o in plan.ordered] == [Path("b.txt")]
        assert len(plan.rejected) == 1
        assert isinstance(plan.rejected[0][1], InvalidNewName)

    def test_rejects_colliding_destinations(self):
        batch = [m("d/a1.txt", "same.txt"), m("d/a2.txt", "same.txt"), m("d/b.txt", "c.txt")]
        plan = plan_batch(batch, case_insensitive=False)
        assert [o.path for o in plan.ordered] == [Path("d/b.txt")]
        assert {r.path for r, _ in plan.rejected} == {Path("d/a1.txt"), Path("d/a2.txt")}
        assert all(isinstance(e, DestinationCollision) for _, e in plan.rejected)

    def test_case_insensitive_collisions(self):
        batch = [m("A.txt", "x.txt"), m("B.txt", "X.txt")]
        assert len(plan_batch(batch, case_insensitive=True).rejected) == 2
        assert plan_batch(batch, case_insensitive=False).rejected == []

    def test_same_name_in_different_directories_is_fine(self):
        batch = [m("one/a.txt", "b.txt"), m("two/a.txt", "b.txt")]
        assert plan_batch(batch, case_insensitive=False).rejected == []

    def test_unchanged_names_stay_in_plan(self):
        plan = plan_batch([m("a.txt"), m("b.txt", "c.txt")], case_insensitive=False)
        assert len(plan.ordered) == 2
        assert plan.total_count == 1


class TestApply:
    def test_nested_directory_and_file(self, tree, reporter):
        root = tree("foo/bar/bar.txt")
        batch = [
            Match(root / "foo" / "bar", "qux", is_dir=True),
            Match(root / "foo" / "bar" / "bar.txt", "qux.txt", is_dir=False),
        ]
        plan = plan_batch(batch, case_insensitive=False)

        result = apply_plan(plan, ApplyMode.FORCED, reporter)

        assert result.failed == []
        assert (root / "foo" / "qux" / "qux.txt").is_file()
        assert not (root / "foo" / "bar").exists()
        assert [src.name for src, _ in reporter.renames] == ["bar.txt", "bar"]

    def test_nested_directories(self, tree):
        root = tree("dir_a/dir_b/dir_c/")
        batch = [
            Match(root / "dir_a", "A", is_dir=True),
            Match(root / "dir_a" / "dir_b", "B", is_dir=True),
            Match(root / "dir_a" / "dir_b" / "dir_c", "C", is_dir=True),
        ]
        result = apply_plan(plan_batch(batch, case_insensitive=False), ApplyMode.FORCED)
        assert result.success_count == 3
        assert (root / "A" / "B" / "C").is_dir()

    def test_dry_run_touches_nothing(self, tree, reporter):
        root = tree("a1.txt", "a2.txt", "a3.txt")
        batch = [Match(root / f"a{i}.txt", f"b{i}.txt", is_dir=False) for i in (1, 2, 3)]

        result = apply_plan(plan_batch(batch, case_insensitive=False), ApplyMode.DRY_RUN, reporter)

        assert sorted((p.name, n) for p, n, _ in reporter.found) == [
            ("a1.txt", "b1.txt"), ("a2.txt", "b2.txt"), ("a3.txt", "b3.txt")
        ]
        assert len(result.previewed) == 3
        assert sorted(p.name for p in root.iterdir()) == ["a1.txt", "a2.txt", "a3.txt"]

    def test_dry_run_does_not_need_sources(self, tmp_path, reporter):
        plan = plan_batch([Match(tmp_path / "gone.txt", "new.txt", False)], case_insensitive=False)
        result = apply_plan(plan, ApplyMode.DRY_RUN, reporter)
        assert len(result.previewed) == 1
        assert reporter.failures == []

    def test_failure_does_not_stop_batch(self, tree, reporter):
        root = tree("a.txt", "b.txt", "taken.txt")
        batch = [
            Match(root / "missing.txt", "x.txt", False),
            Match(root / "a.txt", "taken.txt", False),
            Match(root / "b.txt", "c.txt", False),
        ]

        result = apply_plan(plan_batch(batch, case_insensitive=False), ApplyMode.FORCED, reporter)

        assert result.failed_count == 2
        assert all(isinstance(e, RenameFailed) for e in reporter.failures)
        assert (root / "c.txt").is_file()
        assert (root / "a.txt").read_text(encoding="utf-8") == "a.txt"
        assert (root / "taken.txt").read_text(encoding="utf-8") == "taken.txt"

    def test_rename_one_refuses_existing_destination(self, tree):
        root = tree("a.txt", "b.txt")
        with pytest.raises(RenameFailed) as info:
            rename_one(Match(root / "a.txt", "b.txt", False))
        assert info.value.source == root / "a.txt"
        assert info.value.destination == root / "b.txt"
        assert isinstance(info.value.cause, FileExistsError)

    def test_unchanged_entries_are_skipped(self, tree):
        root = tree("same.txt")
        decisions = ScriptedDecisions([])
        result = apply_plan(plan_batch([Match(root / "same.txt", "same.txt", False)]),
                            ApplyMode.INTERACTIVE, decisions=decisions)
        assert result.skipped_count == 1
        assert decisions.asked == []

    def test_empty_plan_does_nothing(self, tmp_path, reporter):
        result = apply_plan(plan_batch([]), ApplyMode.FORCED, reporter, log_dir=tmp_path / "logs")
        assert result.success_count == 0
        assert reporter.renames == []
        assert not (tmp_path / "logs").exists()

    def test_summary(self, tree, caplog):
        root = tree("a.txt")
        batch = [Match(root / "a.txt", "c.txt", False), Match(root / "missing.txt", "d.txt", False)]

        with caplog.at_level(logging.INFO, logger="fnr"):
            result = apply_plan(plan_batch(batch, case_insensitive=False), ApplyMode.FORCED)

        text = result.summary()
        assert "Renamed: 1" in text
        assert "Failed: 1" in text
        assert "missing.txt" in text
        assert text in caplog.text

    def test_rejections_are_reported(self, tree, reporter):
        root = tree("a.txt")
        plan = plan_batch([Match(root / "a.txt", "../a.txt", False)], case_insensitive=False)
        result = apply_plan(plan, ApplyMode.FORCED, reporter)
        assert result.success_count == 0
        assert len(reporter.rejections) == 1
        assert (root / "a.txt").exists()


class TestInteractive:
    def batch(self, root):
        return plan_batch(
            [Match(root / f"f{i}.txt", f"g{i}.txt", False) for i in range(4)],
            case_insensitive=False,
        )

    def test_yes_and_no(self, tree):
        root = tree(*[f"f{i}.txt" for i in range(4)])
        decisions = ScriptedDecisions([Decision.YES, Decision.NO, Decision.NO, Decision.YES])

        result = apply_plan(self.batch(root), ApplyMode.INTERACTIVE, decisions=decisions)

        assert sorted(p.name for p in root.iterdir()) == ["f1.txt", "f2.txt", "g0.txt", "g3.txt"]
        assert result.skipped_count == 2

    def test_all_stops_prompting(self, tree):
        root = tree(*[f"f{i}.txt" for i in range(4)])
        decisions = ScriptedDecisions([Decision.NO, Decision.ALL])

        result = apply_plan(self.batch(root), ApplyMode.INTERACTIVE, decisions=decisions)

        assert len(decisions.asked) == 2
        assert result.success_count == 3
        assert sorted(p.name for p in root.iterdir()) == ["f0.txt", "g1.txt", "g2.txt", "g3.txt"]

    def test_quit_leaves_rest_untouched(self, tree, reporter):
        root = tree(*[f"f{i}.txt" for i in range(4)])
        decisions = ScriptedDecisions([Decision.YES, Decision.QUIT])

        result = apply_plan(self.batch(root), ApplyMode.INTERACTIVE, reporter, decisions)

        assert result.quit
        assert reporter.quitted
        assert sorted(p.name for p in root.iterdir()) == ["f1.txt", "f2.txt", "f3.txt", "g0.txt"]

    def test_keyboard_interrupt_is_quit(self, tree):
        class Interrupting(DecisionSource):
            def decide(self, match):
                raise KeyboardInterrupt

        root = tree(*[f"f{i}.txt" for i in range(4)])
        result = apply_plan(self.batch(root), ApplyMode.INTERACTIVE, decisions=Interrupting())

        assert result.quit
        assert result.success_count == 0
        assert sorted(p.name for p in root.iterdir()) == [f"f{i}.txt" for i in range(4)]

    def test_needs_decision_source(self, tmp_path):
        with pytest.raises(ValueError):
            apply_plan(plan_batch([]), ApplyMode.INTERACTIVE)

    def test_always_decide(self, tree):
        root = tree(*[f"f{i}.txt" for i in range(4)])
        result = apply_plan(self.batch(root), ApplyMode.INTERACTIVE, decisions=AlwaysDecide(Decision.NO))
        assert result.skipped_count == 4


def test_journal_written(tree, tmp_path):
    root = tree("data/a.txt")
    log_dir = tmp_path / "logs"
    plan = plan_batch([Match(root / "data" / "a.txt", "b.txt", False)], case_insensitive=False)

    apply_plan(plan, ApplyMode.FORCED, log_dir=log_dir)

    plan_logs = list(log_dir.glob("rename_plan_*.json"))
    result_logs = list(log_dir.glob("rename_result_*.json"))
    assert len(plan_logs) == 1 and len(result_logs) == 1
    data = json.loads(result_logs[0].read_text(encoding="utf-8"))
    assert data["success_count"] == 1
    assert data["success"][0]["dst"].endswith("b.txt")
