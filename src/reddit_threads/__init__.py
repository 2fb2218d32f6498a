"""Fetch complete Reddit threads: post, full comment tree, "more" stubs resolved."""

from reddit_threads.config import TOOL_VERSION as __version__

__all__ = ["__version__"]
