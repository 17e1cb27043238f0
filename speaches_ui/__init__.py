"""Web gateway for a speaches.ai text-to-speech / speech-to-text server."""

__version__ = "0.1.0"
