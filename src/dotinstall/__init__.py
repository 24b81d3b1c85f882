"""Append-only dotfiles provisioning for a single home directory."""

__version__ = "0.1.0"
