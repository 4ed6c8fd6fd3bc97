"""gitstate: structured git working-tree and index status."""

__version__ = "0.1.0"
