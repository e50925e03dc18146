"""Typed records exchanged with the scoring engine."""
