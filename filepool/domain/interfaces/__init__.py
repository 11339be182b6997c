"""Domain Interfaces (Ports):

Defines the contracts (Abstract Base Classes) that the cache pool and its
collaborators implement. Core logic depends on these interfaces, not on
concrete storage or serialization.
"""
