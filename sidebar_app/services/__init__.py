"""Kernel services shared by the application modules."""
