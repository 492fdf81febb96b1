"""
perftree package bootstrap.

Subpackages:
- interface: Adapters for the interactive CLI and telemetry layers.
- domain: Position tracking, perft output parsing and result diffing.
- infrastructure: Configuration and the external perft providers.
"""

__version__ = "0.1.0"

__all__ = ["interface", "domain", "infrastructure"]
