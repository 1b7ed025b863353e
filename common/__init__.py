"""Shared helpers for logging, external commands, files and the host system."""
