"""Relay service that performs privileged uploads and completions for a plugin."""

__version__ = "1.0.0"
