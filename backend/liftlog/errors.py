# liftlog/errors.py
class NotFoundError(LookupError):
    """Entity is missing or belongs to someone else; callers can't tell which."""

    def __init__(self, what: str):
        super().__init__(f"{what} not found")
        self.what = what


class PersistenceError(RuntimeError):
    """The datastore rejected a write; the unit of work was rolled back."""

    def __init__(self, operation: str):
        super().__init__(f"Failed to {operation}")
        self.operation = operation
