"""Features module for trusted-auth.

- auth: trusted identity adapters, persistence stores and the reconciliation engine
- users: wiki documents, user profiles and group membership
"""
