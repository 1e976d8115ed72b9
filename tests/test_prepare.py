"""Unit tests for budgeted analysis text preparation."""

from datetime import datetime

from commentforest.models import CommentNode, Thread
from commentforest.prepare import estimate_reduction, prepare_for_analysis, prepare_payload


def _node(comment_id: str, children: list[CommentNode] | None = None, score: int | None = None) -> CommentNode:
    return CommentNode(
        id=comment_id,
        author=f"user{comment_id}",
        content=f"comment {comment_id}",
        created_at=datetime(2025, 6, 1, 9, 30),
        score=score,
        children=children or [],
    )


def _thread(comments: list[CommentNode], title: str = "Issue") -> Thread:
    return Thread(
        id=title,
        title=title,
        description="details",
        author="op",
        created_at=datetime(2025, 6, 1, 8, 0),
        source_type="GitHub Issue",
        url="https://github.com/o/r/issues/1",
        comments=comments,
    )


class TestPrepareForAnalysis:
    def test_slim_format(self) -> None:
        text, count = prepare_for_analysis([_thread([_node("1", [_node("2")], score=3)])])
        assert count == 2
        assert "# Issue" in text
        assert "details" in text
        assert "**user1**:\ncomment 1\n" in text
        assert "  **user2**:\n  comment 2\n" in text
        assert "Source:" not in text
        assert "Score" not in text

    def test_full_format(self) -> None:
        text, _ = prepare_for_analysis(
            [_thread([_node("1", score=3), _node("2", score=0)])], slim=False
        )
        assert "Author: op" in text
        assert "Created: 2025-06-01 08:00" in text
        assert "Source: GitHub Issue" in text
        assert "URL: https://github.com/o/r/issues/1" in text
        assert "**user1** (2025-06-01 09:30):" in text
        assert "_Score: 3_" in text
        assert "_Score: 0_" not in text

    def test_limit_is_depth_first(self) -> None:
        thread = _thread([_node("1", [_node("1a"), _node("1b")]), _node("2")])
        text, count = prepare_for_analysis([thread], max_comments=2)
        assert count == 2
        assert "comment 1a" in text
        assert "comment 1b" not in text
        assert "comment 2" not in text
        assert "_Note: Analysis limited to 2 comments for optimal performance._" in text

    def test_limit_spans_threads(self) -> None:
        threads = [_thread([_node("1"), _node("2")], "A"), _thread([_node("3")], "B")]
        text, count = prepare_for_analysis(threads, max_comments=2)
        assert count == 2
        assert "# B" not in text

    def test_deep_chain(self) -> None:
        node = _node("last")
        for i in range(3000):
            node = _node(str(i), [node])
        text, count = prepare_for_analysis([_thread([node])], max_comments=5000)
        assert count == 3001
        assert "comment last" in text
        assert "_Note:" not in text

    def test_deep_chain_limit(self) -> None:
        node = _node("last")
        for i in range(3000):
            node = _node(str(i), [node])
        text, count = prepare_for_analysis([_thread([node])], max_comments=1200)
        assert count == 1200
        # the chain was built leaf-first, so the root is "2999"
        assert "comment 1800" in text
        assert "comment 1799" not in text
        assert "_Note: Analysis limited to 1200 comments for optimal performance._" in text

    def test_no_note_when_within_budget(self) -> None:
        text, count = prepare_for_analysis([_thread([_node("1")])], max_comments=1)
        assert count == 1
        assert "_Note" not in text

    def test_empty(self) -> None:
        assert prepare_for_analysis([]) == ("", 0)

    def test_payload(self) -> None:
        payload = [{"id": "v", "title": "Vid", "comments": [{"id": "c", "text": "hey"}]}]
        text, count = prepare_payload(payload, "youtube")
        assert count == 1
        assert "# Vid" in text
        assert "hey" in text

    def test_payload_unknown_service(self) -> None:
        assert prepare_payload([], "nowhere") == ("", 0)


class TestEstimateReduction:
    def test_reduction(self) -> None:
        assert estimate_reduction("x" * 200, "x" * 50) == (200, 50, 75.0)

    def test_utf8_bytes(self) -> None:
        original, prepared, _ = estimate_reduction("é", "é")
        assert (original, prepared) == (2, 2)

    def test_empty_original(self) -> None:
        assert estimate_reduction("", "abc") == (0, 3, 0.0)
