"""Authentication domain: accounts, errors, gateway contract and service."""
