"""Exceptions raised by the introspection engine.

Catalog incompatibilities between server versions are absorbed internally
(fallback query chain, missing enum support) and never reach callers. What
does reach callers is one of the errors below or an unwrapped psycopg2 error
from a query that failed for any other reason.
"""


class IntrospectionError(Exception):
    """Base class for introspection failures."""


class ConnectionFailure(IntrospectionError):
    """The database connection could not be established."""


class ConnectionCloseError(IntrospectionError):
    """Closing the database connection failed."""


class CatalogShapeError(IntrospectionError):
    """The catalog returned data the engine cannot interpret."""


class UnresolvableArrayTypeError(CatalogShapeError):
    """An array-typed column has no determinable element type."""


class MissingRowError(IntrospectionError):
    """A catalog lookup that must return a row returned none."""
