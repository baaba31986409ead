"""Identity: users, credentials and access tokens."""
