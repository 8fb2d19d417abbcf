"""
Similarity Scorer Module

Cheap, deterministic string similarity used to score discovered concepts.
This is not NLP: scores must be reproducible so confidence ordering is stable.
"""

EXACT_MATCH_SCORE = 1.0
SUBSTRING_SCORE = 0.8


def similarity(concept1: str, concept2: str) -> float:
    """
    Calculate the similarity between two concepts.

    Rules, in order:
    - identical after normalization: 1.0
    - one contains the other: 0.8
    - otherwise Jaccard similarity over the sets of unique characters

    Returns:
        Score in [0, 1], symmetric in its arguments
    """
    c1 = concept1.strip().lower()
    c2 = concept2.strip().lower()

    if c1 == c2:
        return EXACT_MATCH_SCORE

    if c1 in c2 or c2 in c1:
        return SUBSTRING_SCORE

    chars1 = set(c1)
    chars2 = set(c2)
    union = chars1 | chars2
    if not union:
        return 0.0
    return len(chars1 & chars2) / len(union)
