"""User Graph - GraphQL gateway over a REST users/companies backend."""

__version__ = "0.1.0"
