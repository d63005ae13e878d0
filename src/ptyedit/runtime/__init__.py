"""Telemetry, the key source, and the input multiplexer."""
