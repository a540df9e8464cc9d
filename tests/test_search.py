"""Tests for segmented search."""

from __future__ import annotations

from pathlib import Path

import pytest

import hop_py.search as search
from hop_py.config import HopConfig
from hop_py.errors import NoMatchError
from hop_py.ranking import rank
from hop_py.search import find_candidates, jump, literal_directory, resolve, split_pattern


class FakeSelector:
    def __init__(self, choice: Path | None = None) -> None:
        self.choice = choice
        self.calls = 0

    def select(self, candidates):
        self.calls += 1
        return self.choice


def test_split_pattern_drops_empty_segments() -> None:
    assert split_pattern("web//src/") == ["web", "src"]
    assert split_pattern("/") == []


class TestResolve:
    def test_no_segments_filters_by_threshold(self, make_candidate) -> None:
        cands = [make_candidate("/a", 10), make_candidate("/b", 50)]
        result = resolve(cands, [], HopConfig(threshold=20))
        assert [str(c.path) for c in result] == ["/b"]

    def test_parent_score_and_nesting_penalty(self, tmp_path: Path, make_tree, make_candidate) -> None:
        make_tree(tmp_path, "proj/src", "proj/a/b/src")
        parent = make_candidate(str(tmp_path / "proj"), 50)
        result = resolve([parent], ["src"], HopConfig())
        assert [(c.path, c.score) for c in result] == [
            (tmp_path / "proj" / "src", 121),
            (tmp_path / "proj" / "a" / "b" / "src", 105),
        ]
        deep = result[1]
        assert deep.full_score == deep.score
        assert ("nesting penalty", -16) in deep.reasons
        assert ("parent score", 50) in deep.reasons

    def test_deeper_never_outscores_shallower(self, tmp_path: Path, make_tree, make_candidate) -> None:
        make_tree(tmp_path, "p/lib", "p/x/lib", "p/x/y/lib")
        parent = make_candidate(str(tmp_path / "p"), 0)
        result = resolve([parent], ["lib"], HopConfig())
        by_depth = sorted(result, key=lambda c: c.depth)
        scores = [c.score for c in by_depth]
        assert scores == sorted(scores, reverse=True)

    def test_intermediate_threshold_prunes_before_descending(
        self, tmp_path: Path, make_tree, make_candidate
    ) -> None:
        make_tree(tmp_path, "p/sub/leaf")
        parent = make_candidate(str(tmp_path / "p"), 0)
        assert resolve([parent], ["sub", "leaf"], HopConfig(threshold=100)) == []

        parent = make_candidate(str(tmp_path / "p"), 0)
        (leaf,) = resolve([parent], ["sub", "leaf"], HopConfig())
        assert leaf.score == 163

    def test_show_all_ignores_threshold(self, tmp_path: Path, make_tree, make_candidate) -> None:
        make_tree(tmp_path, "p/sub/leaf")
        parent = make_candidate(str(tmp_path / "p"), 0)
        result = resolve([parent], ["sub", "leaf"], HopConfig(threshold=100, show_all=True))
        assert [c.name for c in result] == ["leaf"]

    def test_merges_branches_best_first(self, tmp_path: Path, make_tree, make_candidate) -> None:
        make_tree(tmp_path, "one/src", "two/src")
        low = make_candidate(str(tmp_path / "one"), 10)
        high = make_candidate(str(tmp_path / "two"), 30)
        result = resolve([low, high], ["src"], HopConfig())
        assert [c.path.parent.name for c in result] == ["two", "one"]


class TestFindCandidates:
    def test_web_src_prefers_closer_match(self, projects: Path) -> None:
        found = find_candidates("web/src", HopConfig(), projects / "here")
        assert [(c.path, c.score) for c in found] == [
            (projects / "webapp" / "src", 120.5),
            (projects / "webtools" / "source", 90.0),
        ]

    def test_results_nested_under_first_segment(self, projects: Path) -> None:
        found = find_candidates("web/src", HopConfig(), projects / "here")
        assert all(c.path.parent.name.startswith("web") for c in found)

    def test_ranked_result_is_idempotent(self, projects: Path) -> None:
        cwd = projects / "here"
        first = rank(find_candidates("web/src", HopConfig(), cwd), HopConfig(), cwd)
        second = rank(find_candidates("web/src", HopConfig(), cwd), HopConfig(), cwd)
        assert [(c.path, c.score) for c in first] == [(c.path, c.score) for c in second]
        assert first[0].path == projects / "webapp" / "src"

    def test_empty_pattern(self, projects: Path) -> None:
        assert find_candidates("//", HopConfig(), projects) == []

    def test_overlapping_parents_yield_one_candidate(
        self, tmp_path: Path, make_tree
    ) -> None:
        # "webapp" and "webapp/web" both match "web" and both reach "src"
        make_tree(tmp_path, "p/webapp/web/src", "p/here")
        target = tmp_path / "p" / "webapp" / "web" / "src"
        found = find_candidates("web/src", HopConfig(), tmp_path / "p" / "here")
        assert [(c.path, c.score) for c in found] == [(target, 142)]

        selector = FakeSelector()
        assert jump("web/src", HopConfig(), selector, tmp_path / "p" / "here") == target
        assert selector.calls == 0


class TestJump:
    def test_literal_directory_shortcut(self, projects: Path) -> None:
        selector = FakeSelector()
        assert jump("webapp/src", HopConfig(), selector, projects) == projects / "webapp" / "src"
        assert selector.calls == 0

    def test_literal_directory(self, projects: Path) -> None:
        assert literal_directory("", projects) == Path.home()
        assert literal_directory("../here", projects / "webapp") == projects / "here"
        assert literal_directory("nope", projects) is None

    def test_fuzzy_jump(self, projects: Path) -> None:
        result = jump("web/src", HopConfig(always_first=True), FakeSelector(), projects / "here")
        assert result == projects / "webapp" / "src"

    def test_no_match(self, monkeypatch: pytest.MonkeyPatch, projects: Path) -> None:
        monkeypatch.setattr(search, "search_up", lambda start, pattern: [])
        with pytest.raises(NoMatchError, match="zzz"):
            jump("zzz", HopConfig(), FakeSelector(), projects)
