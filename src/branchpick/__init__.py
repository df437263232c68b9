"""branchpick: fuzzy terminal picker for git branches."""

__version__ = "0.1.0"
