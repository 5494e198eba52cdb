"""Repair of truncated markdown buffers.

Usage:
    >>> from arroyo.repair import repair_incomplete_markdown
    >>> repair_incomplete_markdown("**Hello")
    '**Hello**'

Incomplete links and footnote references are completed with placeholder
targets in the ``arroyo:`` scheme (see INCOMPLETE_LINK and friends) so a
renderer can style them as pending.
"""

from arroyo.repair.core import repair_incomplete_markdown
from arroyo.repair.inline import INCOMPLETE_FOOTNOTE, INCOMPLETE_IMAGE, INCOMPLETE_LINK, InlineScanner

__all__ = [
    "INCOMPLETE_FOOTNOTE",
    "INCOMPLETE_IMAGE",
    "INCOMPLETE_LINK",
    "InlineScanner",
    "repair_incomplete_markdown",
]
