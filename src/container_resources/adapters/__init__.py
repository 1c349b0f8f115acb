"""Adapters: runtime implementations of the outbound ports and the persisted state boundary."""
