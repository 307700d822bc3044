"""Command line drivers."""
