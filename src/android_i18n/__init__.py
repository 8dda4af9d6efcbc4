"""android-i18n: bulk translation of Android string resources."""

__version__ = "0.1.0"
