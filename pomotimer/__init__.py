"""pomotimer: a pomodoro timer that keeps your Slack status in sync."""

__version__ = "0.1.0"
