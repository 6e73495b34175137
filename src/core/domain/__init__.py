"""Domain models and pure helpers.

Plain data structures (Pydantic v2 / dataclasses) and the domain-name
validator. Nothing here knows about HTTP, files or the CLI.
"""
