"""
Unit tests for submission normalization.
"""

import pytest

from review_pipeline.errors import ValidationError
from review_pipeline.normalizer import normalize


class TestNormalize:
    """Test review text extraction."""

    def test_message_field(self):
        text = "Worst experience ever. The service was horrible."
        assert normalize({"message": text}) == text

    def test_review_field(self):
        assert normalize({"review": "Great product, highly recommend!"}) == "Great product, highly recommend!"

    @pytest.mark.parametrize("review", ["other text", "", None])
    def test_message_takes_precedence(self, review):
        assert normalize({"message": "from message", "review": review}) == "from message"

    def test_empty_message_falls_back_to_review(self):
        assert normalize({"message": "", "review": "from review"}) == "from review"

    @pytest.mark.parametrize("text", [
        "  padded with spaces  ",
        "MiXeD CaSe",
        "line one\nline two",
        "x" * 20000,
        "   ",
    ])
    def test_text_is_returned_verbatim(self, text):
        """No trimming, case folding or truncation."""
        assert normalize({"message": text}) == text

    @pytest.mark.parametrize("submission", [
        {},
        {"message": ""},
        {"review": ""},
        {"message": "", "review": ""},
        {"message": None},
        {"message": 42, "review": ["list"]},
        {"text": "wrong field name"},
    ])
    def test_missing_text_is_rejected(self, submission):
        with pytest.raises(ValidationError, match="missing review text"):
            normalize(submission)

    @pytest.mark.parametrize("submission", [None, "message", ["message"]])
    def test_non_mapping_is_rejected(self, submission):
        with pytest.raises(ValidationError):
            normalize(submission)
