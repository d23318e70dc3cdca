"""Graph nodes module."""
