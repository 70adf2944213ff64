"""Integration tests against a real Pact Broker container (Testcontainers).

Opt-in: set PACT_USE_TESTCONTAINERS=true and have Docker available.
"""
