"""Entrypoints (inbound adapters) for GERBIL.

Expose the framework to the outside world: currently the command-line
interface that runs scenario files.
"""
