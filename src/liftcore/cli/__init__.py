"""Command-line interface for liftcore."""
