"""Domain Layer: value objects, exceptions and interfaces of the cache."""
