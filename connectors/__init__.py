"""
connectors — clients for external services.

Currently:
  • GitHub — public repository listing shown on developer profiles
"""
