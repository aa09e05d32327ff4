"""Command line interface for fret_tuner."""
