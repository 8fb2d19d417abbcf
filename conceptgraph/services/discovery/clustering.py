"""
Greedy concept clustering.

Single-pass, seed-based grouping: each unprocessed concept seeds a cluster
and pulls in every later unprocessed concept similar to the seed. Results
depend on input order, and the same ordered input always yields the same
clusters.
"""

import re
from collections.abc import Callable, Sequence

from .similarity import similarity

SEMANTIC_CLUSTER_THRESHOLD = 0.6

_WORD_SPLIT = re.compile(r"[\s\-_]+")


def greedy_cluster(
    concepts: Sequence[str],
    is_similar: Callable[[str, str], bool],
    max_clusters: int | None = None,
) -> list[list[str]]:
    """
    Group concepts around seed concepts.

    Args:
        concepts: Concepts in the order they should be considered
        is_similar: Predicate comparing the seed concept to a candidate
        max_clusters: Maximum number of clusters to return (None for all)

    Returns:
        Clusters with more than one member, largest first
    """
    clusters: list[list[str]] = []
    processed: set[str] = set()

    for index, seed in enumerate(concepts):
        if seed in processed:
            continue

        cluster = [seed]
        processed.add(seed)

        for other in concepts[index + 1 :]:
            if other in processed:
                continue
            if is_similar(seed, other):
                cluster.append(other)
                processed.add(other)

        if len(cluster) > 1:
            clusters.append(cluster)

    # sorted() is stable, so equal-sized clusters keep their seed order
    clusters = sorted(clusters, key=len, reverse=True)
    if max_clusters is not None:
        clusters = clusters[:max_clusters]
    return clusters


def is_semantically_close(concept1: str, concept2: str) -> bool:
    """Similarity-score rule used for discovery clusters."""
    return similarity(concept1, concept2) > SEMANTIC_CLUSTER_THRESHOLD


def is_neighborhood_similar(concept1: str, concept2: str) -> bool:
    """
    Word/prefix rule used for neighborhood clusters.

    Two concepts are similar if they are identical, share a word while
    either has at most three words, contain one another, or share their
    first three characters.
    """
    c1 = concept1.strip().lower()
    c2 = concept2.strip().lower()

    if c1 == c2:
        return True

    words1 = [word for word in _WORD_SPLIT.split(c1) if word]
    words2 = [word for word in _WORD_SPLIT.split(c2) if word]
    common_words = [word for word in words1 if word in words2]
    if common_words and (len(words1) <= 3 or len(words2) <= 3):
        return True

    if c1 in c2 or c2 in c1:
        return True

    prefix_length = min(3, len(c1), len(c2))
    if prefix_length >= 3 and c1[:prefix_length] == c2[:prefix_length]:
        return True

    return False
