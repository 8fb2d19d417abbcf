"""Errors raised by the concept registry storage layer."""


class RegistryUnavailable(Exception):
    """A concept registry could not be read or written."""

    def __init__(self, registry: str, message: str):
        self.registry = registry
        super().__init__(f"Registry '{registry}' unavailable: {message}")


class UnknownRegistry(ValueError):
    """The requested registry name is not one of tags, categories, ontology."""
