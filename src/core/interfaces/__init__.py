"""Core contracts.

Protocols implemented by concrete adapters, so the services depend on
abstractions and tests can plug in fakes.
"""
