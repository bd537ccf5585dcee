"""Operator-facing reporting sinks."""

from puppet_provisioner.ui.sinks import CapturingSink, ConsoleSink, SinkEvent

__all__ = ["CapturingSink", "ConsoleSink", "SinkEvent"]
