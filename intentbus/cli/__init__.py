"""Command-line interface for intentbus."""
