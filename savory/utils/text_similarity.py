import math


def edit_distance(a, b):
    """Levenshtein distance between two strings.

    Insertion, deletion and substitution each cost 1. Uses the full
    (len(a)+1) x (len(b)+1) dynamic-programming matrix.
    """
    a = a or ""
    b = b or ""
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(a) + 1):
        matrix[0][i] = i
    for j in range(len(b) + 1):
        matrix[j][0] = j

    for j in range(1, len(b) + 1):
        for i in range(1, len(a) + 1):
            indicator = 0 if a[i - 1] == b[j - 1] else 1
            matrix[j][i] = min(
                matrix[j][i - 1] + 1,  # deletion
                matrix[j - 1][i] + 1,  # insertion
                matrix[j - 1][i - 1] + indicator,  # substitution
            )

    return matrix[len(b)][len(a)]


def fuzzy_match(source, target, tolerance=0.2):
    """
    Check whether `target` matches `source` while tolerating typos.

    A case-insensitive containment in either direction is a match. Otherwise
    every whitespace-delimited word of `target` with at least 3 characters is
    compared against every word of `source` with at least 3 characters; a pair
    within max(floor(len(target_word) * tolerance), 1) edits is a match.

    Args:
        source (str): Text being searched, e.g. a recipe name.
        target (str): Text the user typed.
        tolerance (float): Allowed edits per character of the target word.

    Returns:
        bool: True on the first accepted pair, False otherwise (including
        empty input).
    """
    if not source or not target:
        return False

    source_lower = str(source).lower()
    target_lower = str(target).lower()

    if target_lower in source_lower or source_lower in target_lower:
        return True

    source_words = [w for w in source_lower.split() if len(w) >= 3]
    for word in target_lower.split():
        if len(word) < 3:
            continue
        max_distance = max(math.floor(len(word) * tolerance), 1)
        for source_word in source_words:
            if edit_distance(source_word, word) <= max_distance:
                return True

    return False
