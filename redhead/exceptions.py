class AuthenticationError(Exception):
    """Custom exception for authentication failures."""

    def __init__(self, message: str = "Could not validate credentials"):
        self.message = message
        super().__init__(self.message)


class BadRequestError(Exception):
    """Custom exception for bad client requests."""

    def __init__(self, message: str = "Bad request"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(Exception):
    """Custom exception for resource not found."""

    def __init__(self, resource: str = "Resource"):
        self.message = f"{resource} not found"
        super().__init__(self.message)


class ConflictError(Exception):
    """Raised when a write would break a uniqueness constraint."""

    def __init__(self, message: str = "Resource already exists"):
        self.message = message
        super().__init__(self.message)


class InsufficientCreditsError(Exception):
    """Raised when a user's balance cannot cover a generation."""

    def __init__(self, message: str = "Insufficient credits"):
        self.message = message
        super().__init__(self.message)


class ProviderConfigurationError(Exception):
    """The image provider is missing credentials or is unknown."""

    def __init__(self, message: str = "Image provider not configured"):
        self.message = message
        super().__init__(self.message)


class GenerationError(Exception):
    """The image provider failed, timed out or returned nothing usable."""

    def __init__(self, message: str = "Image generation failed"):
        self.message = message
        super().__init__(self.message)
