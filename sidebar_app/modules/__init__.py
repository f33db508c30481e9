"""Feature modules registered as blueprints."""
