"""API gateway: authenticated reverse proxy in front of the backend services."""
