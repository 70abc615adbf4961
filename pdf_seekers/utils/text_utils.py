"""
Text utility functions for PDF Seekers.

Keyword-in-context helpers: page text is tokenized on single spaces and a
window of tokens around the first exact occurrence of the keyword is cropped.
"""

from typing import List, Optional


DEFAULT_WINDOW = 20


def split_tokens(text: str) -> List[str]:
    """
    Split text on single space characters.

    Consecutive spaces produce empty tokens and newlines stay inside
    tokens, so joining the result with spaces restores the input.
    """
    return text.split(" ")


def find_token(tokens: List[str], keyword: str) -> Optional[int]:
    """Return the position of the first token exactly equal to keyword."""
    for position, token in enumerate(tokens):
        if token == keyword:
            return position
    return None


def window_bounds(position: int, length: int, window: int = DEFAULT_WINDOW) -> tuple:
    """
    Compute the clamped half-open token range around a position.

    Args:
        position: Index of the keyword token.
        length: Number of tokens on the page.
        window: Tokens kept on each side of the keyword.

    Returns:
        (start, end) with start >= 0 and end <= length.
    """
    return max(0, position - window), min(length, position + window + 1)


def crop_around(text: str, keyword: str, window: int = DEFAULT_WINDOW) -> Optional[str]:
    """
    Crop the text surrounding the first exact occurrence of keyword.

    Args:
        text: Page text.
        keyword: Token to locate.
        window: Tokens kept before and after the keyword.

    Returns:
        Space-joined window of at most 2 * window + 1 tokens, or None
        when no token equals keyword (e.g. it only occurs inside a
        larger token).
    """
    tokens = split_tokens(text)
    position = find_token(tokens, keyword)

    if position is None:
        return None

    start, end = window_bounds(position, len(tokens), window)
    return " ".join(tokens[start:end])


if __name__ == "__main__":
    sample = " ".join(f"w{i}" for i in range(60))
    print(crop_around(sample, "w30"))
    print(crop_around(sample, "w2"))
    print(crop_around("a convolutional-layer b", "convolutional"))
