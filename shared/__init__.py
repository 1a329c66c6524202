"""
Shared utilities for the storefront client.

This package aggregates common building blocks consumed by the client
and its mock backend:

- config: Client configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- test_helpers: Token and user factories for tests

Any cross-cutting logic should live here to avoid import cycles. Do not
import from service_* packages into shared/.
"""
