"""Pact Broker publishing for NIOP consumer contract tests.

Publishes the pact files written by the consumer contract tests to a Pact
Broker through its REST API, so CI does not depend on the pact-broker CLI:
- one PUT per pact file to /pacts/provider/{provider}/consumer/{consumer}/version/{version}
- best-effort tagging of the consumer version with the branch and/or a tag
- one outcome per pact file; a bad file never stops the batch

Usage:
    # From Python:
    from src.pact_publishing.broker import PactBrokerPublisher
    from src.pact_publishing.config import resolve_broker_endpoint

    endpoint = resolve_broker_endpoint(os.environ)
    async with PactBrokerPublisher(endpoint) as publisher:
        outcomes = await publisher.publish_all("pacts")

    # From shell (CI publish step):
    python -m src.pact_publishing.cli --pact-dir pacts
"""
