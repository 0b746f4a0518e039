"""Command line interface for docingest."""
