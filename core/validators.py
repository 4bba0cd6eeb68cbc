"""
Core Validators

Shared validation functions for all modules.
"""

from typing import Optional


def validate_min_text_length(
    text: Optional[str],
    min_chars: int,
    module_name: str = "Module"
) -> None:
    """
    Validate that text carries at least min_chars characters.

    Args:
        text: Text to validate (already normalized)
        min_chars: Minimum number of characters
        module_name: Name of the module for error messages

    Raises:
        ValueError: If text is missing or shorter than min_chars
    """
    if not text or len(text) < min_chars:
        raise ValueError(
            f"{module_name}: Text is too short to summarize "
            f"(minimum {min_chars} characters)."
        )


def validate_file_size(
    size_bytes: int,
    max_mb: int,
    module_name: str = "Module"
) -> None:
    """
    Validate that an uploaded file does not exceed max_mb megabytes.

    Raises:
        ValueError: If the file is too large
    """
    if size_bytes > max_mb * 1024 * 1024:
        raise ValueError(
            f"{module_name}: File size ({size_bytes} bytes) exceeds "
            f"maximum of {max_mb} MB."
        )

