"""Personal Dashboard - GitHub activity and app launchers at a glance."""

__version__ = "0.1.0"
