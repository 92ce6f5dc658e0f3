"""Lifecycle hooks observing every phase of an invocation."""

from lambdaware._internal.plugin import LoggingPlugin, Plugin

__all__ = ("LoggingPlugin", "Plugin")
