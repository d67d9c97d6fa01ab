"""
Generators — render config files from the resolved manifest.

Each generator module exposes a ``generate_*()`` function that writes
its file and returns a ``GeneratedFile``.
"""
