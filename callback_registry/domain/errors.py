class AppError(Exception):
    status_code = 400
    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        if status_code:
            self.status_code = status_code
        self.message = message

class NotFound(AppError):
    status_code = 404
    def __init__(self, path: str):
        super().__init__(f"Not Found: {path}")
        self.path = path
