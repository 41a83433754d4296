"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No real I/O beyond temporary files; report through recording loggers.
- Prefer behavior-centric assertions over implementation details.
"""
