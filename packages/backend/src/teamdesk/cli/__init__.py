"""Command-line client for the TeamDesk API."""
