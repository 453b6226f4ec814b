# noqa: D104
"""Environment, configuration and logging helpers."""
