"""
connectors — app integrations for workflow steps.

Provides a small connector framework that handles:
  • auth headers per app (OAuth access token, API key)
  • request plumbing over httpx with error logging
  • prop definitions and their dropdown option loaders
  • GraphQL cursor pagination (Jobber)

Each app (Jobber, Reform, …) is a subclass of BaseConnector.
"""
