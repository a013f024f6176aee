"""User service: registration, login and user administration."""
