"""Core Layer: cache item and pool implementations plus command handling.

Connects the domain contracts with the storage and codec adapters from the
infrastructure layer.
"""
