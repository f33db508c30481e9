"""Core infrastructure for the Side Bar block app."""
