"""Web application package for android-i18n."""

from flask import Flask

from android_i18n.config import initialize_app


def create_app() -> Flask:
    """Application factory for the job API."""
    initialize_app()

    from .app import build_app  # Import here to avoid circular imports

    return build_app()


__all__ = ["create_app"]
