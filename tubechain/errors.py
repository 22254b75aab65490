class InputError(ValueError):
    """
    The request input did not yield an identifier. Always a client error.
    """

    def __init__(self, message, example='?url=https://www.youtube.com/watch?v=VIDEO_ID'):
        super().__init__(message)
        self.message = message
        self.example = example

    def to_payload(self):
        return {
            "status": "error",
            "message": self.message,
            "example": self.example,
        }
