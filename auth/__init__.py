"""
auth — User authentication and authorization.

Provides:
  • JWT issuance & verification (``x-auth-token`` header)
  • Password hashing (bcrypt, salted)
  • Login / current-user API routes
  • ``get_current_user`` FastAPI dependency
  • Ownership checks for owned resources
"""
