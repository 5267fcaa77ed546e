"""Middleware for the short-link web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
