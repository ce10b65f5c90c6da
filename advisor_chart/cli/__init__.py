"""Command line tools for the advisor chart engine."""
