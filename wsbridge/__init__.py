"""Framed binary messages over WebSocket: codec, configuration, client connections and handler dispatch."""

__version__ = "0.1.0"