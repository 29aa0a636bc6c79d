"""disaster-intel: resilient location, media and social-feed resolution for disaster reports."""

__version__ = "0.1.0"
