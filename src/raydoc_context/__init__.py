"""raydoc-context: bounded code context bundles for prompt construction."""

__version__ = "0.1.15"
