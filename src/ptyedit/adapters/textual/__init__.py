"""Textual frontend; ``controller`` is importable without textual installed."""
