"""
Phantom Tunnel manager.

Installs, updates, controls and removes the Phantom Tunnel binary and its
systemd service.
"""

__version__ = "0.1.0"
