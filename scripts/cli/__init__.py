"""Command-line client for URL shortener."""
