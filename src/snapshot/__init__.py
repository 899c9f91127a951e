"""Directory snapshot utilities for asserting on-disk registry state."""
