"""
Shared Kernel

Framework-free building blocks reused by the guesthouse apps: value objects,
the domain error taxonomy and the API error rendering built on top of it.
"""
