"""Player API - user registration/login and Player CRUD over HTTP."""

__version__ = "0.1.0"
