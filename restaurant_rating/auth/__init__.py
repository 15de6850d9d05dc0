"""
Caller identity for the HTTP API.

Responsibilities:
- Store accounts with bcrypt-hashed passwords.
- Keep the logged-in user in the session cookie.
- Supply the caller identity that the ledger records and authorizes against.
"""
