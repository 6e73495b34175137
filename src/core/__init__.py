"""Core: domain models, configuration and services (no CLI, no printing)."""
