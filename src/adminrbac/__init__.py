"""Role hierarchy, permission resolution and admin provisioning."""

__version__ = "0.1.0"
