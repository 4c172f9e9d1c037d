"""Domain layer — conditions, tags, abstract dates, presets.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
