class DomainError(Exception):
    """Base class for domain-specific errors."""

    pass


class EmailNotFoundError(DomainError):
    """Raised when a stored email with the requested id does not exist."""

    def __init__(self, email_id: object) -> None:
        super().__init__(f"Email {email_id} not found")
        self.email_id = email_id


class MissingEmailFieldsError(DomainError):
    """Raised when an email is created without its required fields."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing
