"""Kernel – errors, DDD building blocks and messaging ports."""
