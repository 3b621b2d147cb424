"""Domain layer — lockfile paths, matchers, policy, and dependant analysis.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
