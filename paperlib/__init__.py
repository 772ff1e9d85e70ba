"""Paper Library - classify code files by energy and extract insights from books"""

from __future__ import annotations

__version__ = "1.0.0"
