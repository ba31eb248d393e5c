"""Ports and the explicit dependency bundle."""
