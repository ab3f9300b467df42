"""Adapters between the emote engine and external services."""
