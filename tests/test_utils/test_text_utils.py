"""
Tests for keyword-in-context text helpers.
"""

from pdf_seekers.utils.text_utils import (
    split_tokens,
    find_token,
    window_bounds,
    crop_around
)


def _words(count: int) -> str:
    return " ".join(f"w{i}" for i in range(count))


class TestSplitTokens:
    """Tests for split_tokens function."""

    def test_splits_on_single_spaces(self):
        """Test that only the space character separates tokens."""
        assert split_tokens("a b\nc") == ["a", "b\nc"]

    def test_consecutive_spaces_give_empty_tokens(self):
        """Test that joining restores the input."""
        tokens = split_tokens("a  b")

        assert tokens == ["a", "", "b"]
        assert " ".join(tokens) == "a  b"


class TestFindToken:
    """Tests for find_token function."""

    def test_first_exact_match(self):
        """Test that the first exact token wins."""
        assert find_token(["x", "cnn", "y", "cnn"], "cnn") == 1

    def test_no_partial_match(self):
        """Test that substrings of tokens do not match."""
        assert find_token(["cnns", "cnn-based"], "cnn") is None


class TestWindowBounds:
    """Tests for window_bounds function."""

    def test_middle(self):
        """Test an unclamped window."""
        assert window_bounds(30, 60, 20) == (10, 51)

    def test_clamped_at_start_and_end(self):
        """Test clamping at both edges."""
        assert window_bounds(2, 60, 20) == (0, 23)
        assert window_bounds(58, 60, 20) == (38, 60)


class TestCropAround:
    """Tests for crop_around function."""

    def test_crop_has_at_most_41_tokens(self):
        """Test the maximum crop size."""
        cropped = crop_around(_words(100), "w50")

        tokens = cropped.split(" ")
        assert len(tokens) == 41
        assert tokens[0] == "w30"
        assert tokens[-1] == "w70"

    def test_keyword_as_first_token(self):
        """Test clamping when the keyword starts the text."""
        cropped = crop_around(_words(100), "w0")

        assert cropped == _words(21)

    def test_keyword_as_last_token(self):
        """Test clamping when the keyword ends the text."""
        cropped = crop_around(_words(100), "w99")

        assert cropped.split(" ")[0] == "w79"
        assert cropped.endswith("w99")

    def test_substring_only_returns_none(self):
        """Test a keyword present only inside a longer token."""
        assert crop_around("a convolutional-layer b", "convolutional") is None

    def test_custom_window(self):
        """Test a smaller window."""
        assert crop_around("a b c d e", "c", window=1) == "b c d"
