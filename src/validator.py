"""
Submission validation for the article board.
Checks title and message lengths before anything touches storage.
"""
from typing import List, Tuple

from src.config import DEFAULT_MAX_MESSAGE_BYTES, DEFAULT_MAX_TITLE_BYTES


class SubmissionValidator:
    """Validates submitted title and message against the length limits."""

    def __init__(
        self,
        max_title_bytes: int = DEFAULT_MAX_TITLE_BYTES,
        max_message_bytes: int = DEFAULT_MAX_MESSAGE_BYTES,
    ):
        """
        Initialize validator with limits.

        Lengths are measured in UTF-8 bytes.

        Args:
            max_title_bytes: Maximum title length
            max_message_bytes: Maximum message length
        """
        self.max_title_bytes = max_title_bytes
        self.max_message_bytes = max_message_bytes

    def validate_submission(self, title: str, message: str) -> Tuple[bool, List[str]]:
        """
        Validate a submission against all rules.

        Args:
            title: Submitted title
            message: Submitted message

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        _, title_errors = self.validate_title(title)
        errors.extend(title_errors)

        _, message_errors = self.validate_message(message)
        errors.extend(message_errors)

        is_valid = len(errors) == 0
        return is_valid, errors

    def validate_title(self, title: str) -> Tuple[bool, List[str]]:
        """
        Validate title length.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []
        length = len((title or "").encode("utf-8"))

        if length == 0 or length > self.max_title_bytes:
            errors.append(f"Title length must be between 1 and {self.max_title_bytes} characters")

        is_valid = len(errors) == 0
        return is_valid, errors

    def validate_message(self, message: str) -> Tuple[bool, List[str]]:
        """
        Validate message length.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []
        length = len((message or "").encode("utf-8"))

        if length == 0:
            errors.append("Article content must not be empty")
        elif length > self.max_message_bytes:
            errors.append("Article content too long")

        is_valid = len(errors) == 0
        return is_valid, errors
