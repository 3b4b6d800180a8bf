# ABOUTME: Utilities package initialization for the VSTS REST client
# ABOUTME: Contains the endpoint invoker, resolution, polling, logging and migration helpers

"""
VSTS client utilities

Shared utilities:
    - client.py: Endpoint invoker, authorization header and error type
    - resolve.py: Name-or-id resolution for resource references
    - polling.py: Bounded existence polling for asynchronous operations
    - logging.py: Structured logging with correlation IDs
    - migration.py: git-based repository migration adapter
"""
