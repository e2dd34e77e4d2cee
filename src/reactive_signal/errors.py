"""Error types raised by reactive-signal."""


class ReactiveSignalError(Exception):
    """Base error for all reactive-signal operations."""


class ForbiddenAccess(ReactiveSignalError, AttributeError):
    """Read or write of a prototype/constructor key through a reactive node.

    Subclasses AttributeError so getattr() defaults and hasattr() keep
    working on reactive nodes.

    Attributes:
        key: The rejected key or attribute name.
    """

    def __init__(self, key: object, operation: str) -> None:
        """Initialize error.

        Args:
            key: The rejected key or attribute name.
            operation: Either "read" or "write".
        """
        self.key = key
        self.operation = operation
        super().__init__(f"{operation} of {key!r} is not allowed on a reactive value")
