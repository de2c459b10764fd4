"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class AuthenticationError(AppError):
    """Raised when credentials are rejected by the auth provider."""

    def __init__(self, message="Login failed. Please try again."):
        """Initialize the error."""
        super().__init__(message, 401)


class AccessDeniedError(AppError):
    """Raised when the dashboard access check rejects a user."""

    def __init__(self, message="Access denied"):
        """Initialize the error."""
        super().__init__(message, 403)


class DataLoadError(AppError):
    """Raised when a Firestore query or subscription fails."""

    def __init__(self, message="Failed to load data. Please reload the page."):
        """Initialize the error."""
        super().__init__(message, 503)


class SearchNotConfiguredError(AppError):
    """Raised when the search service has no credentials."""

    def __init__(
        self,
        message=(
            "Search is not configured. Please set ALGOLIA_APP_ID and "
            "ALGOLIA_SEARCH_API_KEY."
        ),
    ):
        """Initialize the error."""
        super().__init__(message, 503)


class SearchError(AppError):
    """Raised when a search request fails."""

    def __init__(self, message="Search failed."):
        """Initialize the error."""
        super().__init__(message, 502)
