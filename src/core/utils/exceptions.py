class AppError(Exception):
    """Base exception for application errors."""

    pass
