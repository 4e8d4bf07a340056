from fastapi import status
from libs.result import Error


class ClientError(Exception):
    """A use-case error the caller can act on; its message is returned as-is."""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)

    def body(self) -> dict:
        return {"error": self.base_error.message, "code": self.base_error.code}


class ServerError(Exception):
    """An internal failure; only the code reaches the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)

    def body(self) -> dict:
        return {"error": "Internal server error", "code": self.base_error.code}
