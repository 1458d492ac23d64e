class LLMServiceError(Exception):
    """Raised when the language model API cannot be reached or answers with an error."""
