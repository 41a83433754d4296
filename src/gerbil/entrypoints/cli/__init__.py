"""GERBIL command-line interface."""
