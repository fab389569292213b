"""Google-backed login service that hands out short-lived JSON Web Tokens."""

__version__ = "0.1.0"
