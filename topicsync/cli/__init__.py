"""topicsync command-line interface."""
