"""Survey service: survey data access and per-user token cache storage."""
