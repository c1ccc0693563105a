"""
Extracts review text from an inbound submission.

Clients send the text under either "message" or "review". The value is
returned exactly as supplied: no trimming, case folding or truncation.
"""

from typing import Any, Mapping

from review_pipeline.errors import ValidationError

# Accepted field names, in precedence order
TEXT_FIELDS = ("message", "review")


def normalize(submission: Mapping[str, Any]) -> str:
    """
    Return the review text carried by a submission.

    "message" takes precedence over "review" when both hold text. Only
    non-empty strings count; any other value is treated as absent.

    Example:
        >>> normalize({"review": "Great product!"})
        'Great product!'

    Args:
        submission: Decoded request body

    Returns:
        The raw value of the first populated text field

    Raises:
        ValidationError: If neither field holds a non-empty string
    """
    if not isinstance(submission, Mapping):
        raise ValidationError("missing review text")

    for name in TEXT_FIELDS:
        value = submission.get(name)
        if isinstance(value, str) and value:
            return value

    raise ValidationError("missing review text")
