"""slackwire: Slack slash command / outgoing webhook request handling and payload encoding."""

__version__ = "0.1.0"
