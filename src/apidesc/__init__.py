"""apidesc - converts API description parameter strings to typed parameter tables."""

__version__ = "0.1.0"
