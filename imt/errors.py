"""Exceptions raised by the indexed Merkle tree."""


class IMTError(Exception):
    """Base class for all tree errors."""


class DuplicateValueError(IMTError, ValueError):

    def __init__(self, value):
        self.value = value
        super().__init__(f"Value {value} already exists in the tree")


class InvalidValueError(IMTError, ValueError):
    """Value is not a non-negative integer, or is the reserved sentinel value 0."""

    def __init__(self, value, reason):
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot insert {value!r}: {reason}")


class InvariantViolationError(IMTError, RuntimeError):

    def __init__(self, message):
        super().__init__(message)


class TreeFullError(IMTError, OverflowError):

    def __init__(self, depth):
        self.depth = depth
        super().__init__(f"Tree of depth {depth} holds at most {2**depth} leaves")


class NoPredecessorError(IMTError, LookupError):

    def __init__(self, value):
        self.value = value
        super().__init__(f"No leaf below {value}, a non-membership proof needs a predecessor")


class InvalidLevelError(IMTError, IndexError):

    def __init__(self, level, depth):
        self.level = level
        self.depth = depth
        super().__init__(f"Invalid level: {level} (valid levels are 0..{depth})")


class TreeFileNotFoundError(IMTError, FileNotFoundError):

    def __init__(self, path):
        self.path = path
        super().__init__(f"File not found: {path}")


class UnknownHashError(IMTError, KeyError):

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown hash backend: {name}")

    def __str__(self):
        # KeyError would repr() the message
        return self.args[0]
