class SourceError(Exception):
    """Raised when an input file cannot be opened, parsed or queried."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Couldn't read file {path}: {reason}")
