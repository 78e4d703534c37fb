"""
Page/per-page to offset window resolution.
Windows are inclusive on both ends: ``[start, end]`` selects
``end - start + 1`` rows beginning at ``start``.
"""
from typing import NamedTuple, Optional

from app.core.exceptions import InvalidParameterError

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20

# Stores bind offsets as signed 64-bit integers
MAX_OFFSET = 2**63 - 1


class PageWindow(NamedTuple):
    """Inclusive offset window."""

    start: int
    end: int

    @property
    def offset(self) -> int:
        return self.start

    @property
    def limit(self) -> int:
        return self.end - self.start + 1


def resolve(
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    default_page: int = DEFAULT_PAGE,
    default_per_page: int = DEFAULT_PER_PAGE,
) -> PageWindow:
    """
    Convert page/per_page into an offset window.

    Args:
        page: 1-based page number (default 1)
        per_page: Rows per page (default 20)

    Returns:
        PageWindow with inclusive start/end offsets

    Raises:
        InvalidParameterError: If page or per_page is below 1, or the window
            reaches past MAX_OFFSET
    """
    page = default_page if page is None else page
    per_page = default_per_page if per_page is None else per_page

    invalid = [
        name for name, value in (("page", page), ("per_page", per_page)) if value < 1
    ]
    if invalid:
        raise InvalidParameterError(
            f"Invalid pagination parameter(s): {', '.join(invalid)} must be >= 1",
            fields=invalid,
        )

    start = (page - 1) * per_page
    end = start + per_page - 1
    if end > MAX_OFFSET:
        raise InvalidParameterError(
            "Invalid pagination parameter(s): page, per_page window is out of range",
            fields=["page", "per_page"],
        )
    return PageWindow(start=start, end=end)
