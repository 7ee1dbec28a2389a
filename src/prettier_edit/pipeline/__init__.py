"""Formatting pipeline stages, backend strategies and the safe executor."""
