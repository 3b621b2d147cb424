"""Infrastructure layer — lockfile storage.

This layer depends on stdlib and the domain error types only.
It must never import from services, commands, or output.
"""
