"""Domain layer — precisions, timestamp arithmetic, intervals and their algebra.

This layer depends only on the stdlib. It must never import from config or
plugins at runtime; the registry only references the plugin manager for typing.
"""
