"""Frontends that render viewport mirrors and feed key codes."""
