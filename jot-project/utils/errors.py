# What it does: Defines the error kinds raised by the Jot core
# How it does: A small exception hierarchy rooted at JotError. jot.main catches JotError (and OSError) at the command boundary and prints a single "fatal:" line
# What data structure it uses: Class hierarchy (tree of exception types)


class JotError(Exception):
    """Base class for every error Jot reports to the user."""


class ObjectNotFound(JotError):
    def __init__(self, oid):
        super().__init__(f"object not found: {oid}")
        self.oid = oid


class CorruptObject(JotError):
    def __init__(self, oid, reason):
        super().__init__(f"corrupt object {oid}: {reason}")
        self.oid = oid
        self.reason = reason


class CorruptIndex(JotError):
    def __init__(self, reason):
        super().__init__(f"corrupt index: {reason}")
        self.reason = reason


class NotARepository(JotError):
    def __init__(self, path):
        super().__init__(f"not a jot repository (or any of the parent directories): {path}")
        self.path = path


class NothingToCommit(JotError):
    def __init__(self):
        super().__init__("nothing to commit (create/copy files and use \"jot add\" to track)")
