"""
auth — User authentication module.

Provides:
  • Input-checked registration and login behind a constant-time gate
  • Password hashing (bcrypt, work factor 12)
  • Signed session tokens (HS256) and their verification
  • ``get_current_claims`` FastAPI dependency for protected routes
"""
