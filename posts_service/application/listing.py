"""
Search filtering and ordering for post listings
"""
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from pyuca import Collator

from ..domain.models import Post

collator = Collator()


class PostOrder(str, Enum):
    """Order keys accepted by the post listing"""
    NAME_ASC = "nombre-asc"
    NAME_DESC = "nombre-desc"
    POPULARITY_ASC = "popularidad-asc"
    POPULARITY_DESC = "popularidad-desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PostOrder"]:
        """Return the matching order, or None for absent/unknown keys"""
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def by_name(self) -> bool:
        """True for the title orders"""
        return self in (PostOrder.NAME_ASC, PostOrder.NAME_DESC)

    @property
    def by_popularity(self) -> bool:
        """True for the popularity orders, which need the popularity lookup"""
        return self in (PostOrder.POPULARITY_ASC, PostOrder.POPULARITY_DESC)

    @property
    def descending(self) -> bool:
        """True for the orders that reverse their ascending counterpart"""
        return self in (PostOrder.NAME_DESC, PostOrder.POPULARITY_DESC)


def title_sort_key(title: str) -> Tuple[int, ...]:
    """
    Collation key for titles

    Unicode Collation Algorithm with the default table: punctuation and
    symbols sort before digits, digits before letters. Base letters compare
    first, then accents, then case with lowercase before uppercase.
    """
    return collator.sort_key(title)


def matches_search(post: Post, search: str) -> bool:
    """Case-insensitive substring match on title or content"""
    needle = search.lower()
    if needle in post.title.lower():
        return True
    return post.content is not None and needle in post.content.lower()


def filter_by_search(posts: Sequence[Post], search: Optional[str]) -> List[Post]:
    """Keep posts matching ``search``; empty or missing search keeps all"""
    if not search:
        return list(posts)
    return [post for post in posts if matches_search(post, search)]


def order_posts(
    posts: Sequence[Post],
    order: Optional[PostOrder],
    popularity: Optional[Dict[int, float]] = None,
) -> List[Post]:
    """
    Order posts by name, popularity or date

    Args:
        posts: Posts to order
        order: Parsed order key; None orders by date, most recent first
        popularity: Popularity by post id, required for popularity orders.
            Posts missing from it rank as 0.

    Returns:
        New ordered list. Descending name and popularity orders are the
        exact reverse of their ascending counterparts.
    """
    if order is None:
        return sorted(posts, key=lambda post: post.date, reverse=True)

    if order.by_name:
        ordered = sorted(posts, key=lambda post: title_sort_key(post.title))
    else:
        lookup = popularity or {}
        ordered = sorted(posts, key=lambda post: lookup.get(post.id) or 0)

    if order.descending:
        ordered.reverse()
    return ordered
