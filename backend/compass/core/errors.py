from fastapi import HTTPException, status


def internal_error(exc: Exception) -> HTTPException:
    """500 with a safe, structured detail (no secrets, no stack)."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "detail": "internal_error",
            "error_type": type(exc).__name__,
            "error": str(exc) or "An unexpected error occurred",
        },
    )
