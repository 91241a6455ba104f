"""Persistence: key-value store, plan and history stores, serializers."""
