"""Django apps of the guesthouse booking service."""
