"""Availability interval engine for roster members (storm and rescue availability)."""
