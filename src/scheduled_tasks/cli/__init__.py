"""Entry point and composition root."""
