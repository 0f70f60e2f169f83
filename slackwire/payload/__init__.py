"""Outbound Slack payload builders and encoders."""
