"""Feature modules for Enscribe."""
