"""Cherry-pick a merged pull request into release branches."""

__version__ = "0.1.0"
