"""Command line entry points for the APU surrogate."""
