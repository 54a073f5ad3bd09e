"""
Custom exception types for the ftmsim motion pipeline.
Keep this focused and non-redundant; prefer built-ins where appropriate.
"""


class InvalidParameter(ValueError):
    """Move or filter parameter outside its valid range (rejected before generation)."""

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"Invalid Parameter: {message}")

    def __str__(self):
        return f"Invalid Parameter: {self.original_message}"


class ProfileTooLarge(RuntimeError):
    """Requested profile would need more samples than MAX_PROFILE_SAMPLES."""

    def __init__(self, message: str, samples: int | None = None):
        self.original_message = message
        self.samples = samples
        super().__init__(f"Profile Too Large: {message}")

    def __str__(self):
        return f"Profile Too Large: {self.original_message}"
