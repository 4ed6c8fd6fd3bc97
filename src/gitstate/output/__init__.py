"""Status renderers."""
