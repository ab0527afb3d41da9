"""Document store exceptions."""


class WriteError(Exception):
    """Raised when a bulk write batch fails.

    The batch is rolled back, so cache tokens staged with it are not
    advanced and the affected page is fetched again on the next run.
    """

    def __init__(self, message: str, *, operations: int = 0) -> None:
        super().__init__(message)
        self.operations = operations
