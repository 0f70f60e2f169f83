"""Outbound HTTP delivery."""
