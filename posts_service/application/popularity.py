"""
Post popularity calculation
"""
import math
from typing import List, Sequence

from ..domain.models import Post, User, PopularityScore


def _divide(numerator: float, denominator: float) -> float:
    """Float division with IEEE-754 results instead of ZeroDivisionError"""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def compute_popularity(posts: Sequence[Post], users: Sequence[User]) -> List[PopularityScore]:
    """
    Compute a popularity score for every post

    popularity = likes / (total users - 1), which is the share of the other
    users that liked the post. Scores that do not satisfy ``>= 0`` are
    clamped to 0, so NaN (no likes, one user) becomes 0 while +inf (likes,
    one user) is kept.

    Args:
        posts: Post snapshot, likes attached where available
        users: User snapshot

    Returns:
        One score per post, in the order of ``posts``
    """
    denominator = len(users) - 1

    scores = []
    for post in posts:
        popularity = _divide(post.like_count, denominator)
        if popularity >= 0:
            scores.append(PopularityScore(id=post.id, popularity=popularity))
        else:
            scores.append(PopularityScore(id=post.id, popularity=0))
    return scores
