"""Convert already-fetched platform payloads into :class:`Thread` objects.

Two supply modes exist. Platforms that export a flat comment list with
parent references (YouTube, GitHub) go through :func:`assemble_comments`,
which handles ordering and orphans. Platforms that already nest replies
(Reddit, Hacker News, DevBlogs, BlueSky) are composed directly.

Payloads are the JSON shapes written by the platform dump tools, decoded
into plain ``dict``/``list`` objects. Every field is read through
:mod:`commentforest.accessors`, so missing fields fall back to defaults.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from commentforest.accessors import (
    first_str,
    get_bool,
    get_datetime,
    get_float,
    get_int,
    get_list,
    get_str,
)
from commentforest.models import CommentNode, Thread
from commentforest.tree import assemble_comments, fold_forest

logger = logging.getLogger(__name__)

_UNKNOWN_AUTHOR = "Unknown"
_TITLE_MAX = 100


# ── Flat supply mode ───────────────────────────────────────────────────────


def from_youtube(videos: Any) -> list[Thread]:
    """One thread per video; comments carry ``parentId`` references."""
    threads: list[Thread] = []
    for video in _records(videos, "youtube"):
        records = [
            CommentNode(
                id=get_str(c, "id") or "",
                parent_id=get_str(c, "parentId"),
                author=get_str(c, "author") or _UNKNOWN_AUTHOR,
                content=first_str(c, "text", "content") or "",
                created_at=get_datetime(c, "publishedAt"),
                score=get_int(c, "likeCount"),
            )
            for c in get_list(video, "comments")
            if isinstance(c, dict)
        ]
        threads.append(
            Thread(
                id=get_str(video, "id") or "",
                title=get_str(video, "title") or "Untitled Video",
                description=get_str(video, "description"),
                author=get_str(video, "channelTitle") or "",
                created_at=get_datetime(video, "publishedAt"),
                url=get_str(video, "url"),
                source_type="YouTube",
                metadata=_compact(
                    ChannelId=get_str(video, "channelId"),
                    ViewCount=get_int(video, "viewCount"),
                    LikeCount=get_int(video, "likeCount"),
                    CommentCount=get_int(video, "commentCount"),
                ),
                comments=assemble_comments(records),
            )
        )
    return threads


def from_github(records: Any) -> list[Thread]:
    """Issues or discussions, whichever each record looks like.

    Discussion dumps carry no ``body`` field, so records without one (or
    with an ``answerId``) are read as discussions.
    """
    threads: list[Thread] = []
    for record in _records(records, "github"):
        if "answerId" in record or "body" not in record:
            threads.append(_discussion_thread(record))
        else:
            threads.append(_issue_thread(record))
    return threads


def from_github_issues(issues: Any) -> list[Thread]:
    """Issues and pull requests; review comments keep their code context."""
    return [_issue_thread(issue) for issue in _records(issues, "github issues")]


def from_github_discussions(discussions: Any) -> list[Thread]:
    return [_discussion_thread(d) for d in _records(discussions, "github discussions")]


def _issue_thread(issue: dict[str, Any]) -> Thread:
    labels = [label for label in get_list(issue, "labels") if isinstance(label, str)]
    return Thread(
        id=get_str(issue, "id") or "",
        title=get_str(issue, "title") or "",
        description=get_str(issue, "body"),
        author=get_str(issue, "author") or _UNKNOWN_AUTHOR,
        created_at=get_datetime(issue, "createdAt"),
        url=first_str(issue, "url", "URL"),
        source_type="GitHub Issue",
        metadata=_compact(
            Upvotes=get_int(issue, "upvotes"),
            Labels=labels or None,
            LastUpdated=get_str(issue, "lastUpdated"),
        ),
        comments=assemble_comments(_github_comments(issue)),
    )


def _discussion_thread(discussion: dict[str, Any]) -> Thread:
    url = get_str(discussion, "url")
    return Thread(
        id=get_str(discussion, "id") or url or "",
        title=get_str(discussion, "title") or "",
        author=get_str(discussion, "author") or _UNKNOWN_AUTHOR,
        created_at=get_datetime(discussion, "createdAt"),
        url=url,
        source_type="GitHub Discussion",
        metadata=_compact(AnswerId=get_str(discussion, "answerId")),
        comments=assemble_comments(_github_comments(discussion)),
    )


def _github_comments(parent: Any) -> list[CommentNode]:
    return [
        CommentNode(
            id=get_str(c, "id") or "",
            parent_id=get_str(c, "parentId"),
            author=get_str(c, "author") or _UNKNOWN_AUTHOR,
            content=first_str(c, "content", "body") or "",
            created_at=get_datetime(c, "createdAt"),
            url=get_str(c, "url"),
            metadata=_compact(
                CodeContext=get_str(c, "codeContext") or None,
                FilePath=get_str(c, "filePath") or None,
                LinePosition=get_int(c, "linePosition"),
            ),
        )
        for c in get_list(parent, "comments")
        if isinstance(c, dict)
    ]


# ── Nested supply mode ─────────────────────────────────────────────────────


def from_reddit(threads: Any) -> list[Thread]:
    """Reddit listings already nest replies under each comment.

    A single thread object is accepted as well as a list of them.
    """
    if isinstance(threads, dict):
        threads = [threads]
    result: list[Thread] = []
    for post in _records(threads, "reddit"):
        result.append(
            Thread(
                id=get_str(post, "id") or "",
                title=get_str(post, "title") or "",
                description=first_str(post, "selfText", "selftext"),
                author=get_str(post, "author") or "[deleted]",
                created_at=get_datetime(post, "createdUtc"),
                url=get_str(post, "url"),
                source_type="Reddit",
                metadata=_compact(
                    Subreddit=get_str(post, "subreddit"),
                    Score=get_int(post, "score"),
                    UpvoteRatio=get_float(post, "upvoteRatio"),
                    NumComments=get_int(post, "numComments"),
                    Permalink=get_str(post, "permalink"),
                ),
                comments=_reddit_comments(get_list(post, "comments")),
            )
        )
    return result


def _reddit_comments(comments: list[Any]) -> list[CommentNode]:
    def build(c: dict[str, Any], replies: list[CommentNode]) -> CommentNode:
        return CommentNode(
            id=get_str(c, "id") or "",
            parent_id=get_str(c, "parentId"),
            author=get_str(c, "author") or "[deleted]",
            content=first_str(c, "body", "content") or "",
            created_at=get_datetime(c, "createdUtc"),
            url=get_str(c, "permalink"),
            score=get_int(c, "score"),
            children=replies,
        )

    return fold_forest(_dicts(comments), lambda c: _dicts(get_list(c, "replies")), build)


def from_hackernews(items: Any) -> list[Thread]:
    """Hacker News items reference their replies through ``kids`` ids.

    *items* holds stories and comments together. Deleted items and
    non-story roots are skipped.
    """
    records = _records(items, "hackernews")
    by_id: dict[int, dict[str, Any]] = {}
    for item in records:
        item_id = get_int(item, "id")
        if item_id is not None:
            by_id[item_id] = item

    threads: list[Thread] = []
    for story in records:
        title = get_str(story, "title")
        if get_bool(story, "deleted") or not title or get_str(story, "type") != "story":
            continue
        seen: set[int] = set()
        threads.append(
            Thread(
                id=get_str(story, "id") or "",
                title=title,
                description=get_str(story, "text"),
                author=get_str(story, "by") or _UNKNOWN_AUTHOR,
                created_at=get_datetime(story, "time"),
                url=get_str(story, "url"),
                source_type="HackerNews",
                metadata={
                    "Score": get_int(story, "score") or 0,
                    "Descendants": get_int(story, "descendants") or 0,
                    "Type": "story",
                },
                comments=_hackernews_comments(by_id, get_list(story, "kids"), seen),
            )
        )
    return threads


def _hackernews_comments(
    by_id: dict[int, dict[str, Any]],
    kids: list[Any],
    seen: set[int],
) -> list[CommentNode]:
    def resolve(ids: list[Any]) -> Iterator[tuple[int, dict[str, Any]]]:
        # lazy, so ``seen`` is updated in depth-first order
        for kid in ids:
            if not isinstance(kid, int) or kid in seen:
                continue
            item = by_id.get(kid)
            if item is None or get_bool(item, "deleted"):
                continue
            seen.add(kid)
            yield kid, item

    def build(entry: tuple[int, dict[str, Any]], replies: list[CommentNode]) -> CommentNode:
        kid, item = entry
        return CommentNode(
            id=str(kid),
            parent_id=get_str(item, "parent"),
            author=get_str(item, "by") or _UNKNOWN_AUTHOR,
            content=get_str(item, "text") or "",
            created_at=get_datetime(item, "time"),
            score=get_int(item, "score"),
            children=replies,
        )

    return fold_forest(resolve(kids), lambda entry: resolve(get_list(entry[1], "kids")), build)


def from_devblogs(article: Any) -> list[Thread]:
    """A blog article and its threaded comment feed."""
    if not isinstance(article, dict):
        logger.warning("DevBlogs payload is not an object; got %s", type(article).__name__)
        return []
    url = get_str(article, "url")
    return [
        Thread(
            id=url or "",
            title=get_str(article, "title") or "Untitled Article",
            description="",
            author=_UNKNOWN_AUTHOR,
            url=url,
            source_type="DevBlogs",
            comments=_devblogs_comments(get_list(article, "comments")),
        )
    ]


def _devblogs_comments(comments: list[Any]) -> list[CommentNode]:
    def build(c: dict[str, Any], replies: list[CommentNode]) -> CommentNode:
        return CommentNode(
            id=get_str(c, "id") or "",
            parent_id=get_str(c, "parentId"),
            author=get_str(c, "author") or _UNKNOWN_AUTHOR,
            content=first_str(c, "bodyHtml", "body") or "",
            created_at=get_datetime(c, "publishedUtc"),
            children=replies,
        )

    return fold_forest(_dicts(comments), lambda c: _dicts(get_list(c, "replies")), build)


def from_bluesky(response: Any) -> list[Thread]:
    """One thread per root post; its direct replies become the comments."""
    items = _dicts(get_list(response, "items"))
    threads: list[Thread] = []
    for post in items:
        if get_str(post, "parentId"):
            continue
        post_id = get_str(post, "id") or ""
        content = get_str(post, "content") or ""
        handle = get_str(post, "author") or ""
        threads.append(
            Thread(
                id=post_id,
                title=_truncate_title(content),
                description=content,
                author=get_str(post, "authorName") or handle,
                created_at=get_datetime(post, "timestampUtc"),
                source_type="BlueSky",
                metadata=_compact(
                    AuthorUsername=get_str(post, "authorUsername") or handle,
                    ProcessedPostCount=get_int(response, "processedPostCount"),
                    MayBeIncomplete=get_bool(response, "mayBeIncomplete"),
                ),
                comments=_bluesky_comments(
                    [i for i in items if get_str(i, "parentId") == post_id]
                ),
            )
        )
    return threads


def _bluesky_comments(items: list[Any]) -> list[CommentNode]:
    def build(i: dict[str, Any], replies: list[CommentNode]) -> CommentNode:
        return CommentNode(
            id=get_str(i, "id") or "",
            parent_id=get_str(i, "parentId"),
            author=get_str(i, "authorName") or get_str(i, "author") or "",
            content=get_str(i, "content") or "",
            created_at=get_datetime(i, "timestampUtc"),
            metadata=_compact(AuthorUsername=get_str(i, "authorUsername") or None),
            children=replies,
        )

    return fold_forest(_dicts(items), lambda i: _dicts(get_list(i, "replies")), build)


def _truncate_title(content: str) -> str:
    if not content:
        return "Untitled Post"
    if len(content) <= _TITLE_MAX:
        return content
    return content[:_TITLE_MAX] + "..."


# ── Dispatch ───────────────────────────────────────────────────────────────

_CONVERTERS: dict[str, Callable[[Any], list[Thread]]] = {
    "youtube": from_youtube,
    "github": from_github,
    "github-issues": from_github_issues,
    "github-discussions": from_github_discussions,
    "reddit": from_reddit,
    "hackernews": from_hackernews,
    "devblogs": from_devblogs,
    "bluesky": from_bluesky,
}

SERVICE_TYPES: tuple[str, ...] = tuple(_CONVERTERS)


def convert(service_type: str, payload: Any) -> list[Thread]:
    """Convert *payload* using the adapter registered for *service_type*.

    Lookup is case-insensitive. Unknown service types yield no threads.
    """
    converter = _CONVERTERS.get(service_type.strip().lower())
    if converter is None:
        logger.warning("No adapter for service type %r", service_type)
        return []
    threads = converter(payload)
    logger.info("Converted %s payload into %d threads", service_type, len(threads))
    return threads


# ── helpers ────────────────────────────────────────────────────────────────


def _records(payload: Any, platform: str) -> list[dict[str, Any]]:
    if not isinstance(payload, list):
        logger.warning(
            "Expected a list of %s records; got %s", platform, type(payload).__name__
        )
        return []
    return _dicts(payload)


def _dicts(items: list[Any]) -> list[dict[str, Any]]:
    return [i for i in items if isinstance(i, dict)]


def _compact(**fields: Any) -> dict[str, Any] | None:
    """Drop None-valued entries; return None when nothing is left."""
    kept = {k: v for k, v in fields.items() if v is not None}
    return kept or None
