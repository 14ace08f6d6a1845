"""Define names of commonly used reference frames."""

DEFAULT_FRAME = "base_link"
"""Frame assumed for poses that don't specify one (the manipulator's base)."""
