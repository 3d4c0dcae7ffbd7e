from typing import Optional


class ResumeAIError(Exception):
    """Base for every failure that ends up as a message in front of the user."""

    status_code = 500
    default_message = "An error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ResumeAIError):
    status_code = 400
    default_message = "Please complete all steps before analyzing."


class EncodingError(ResumeAIError):
    status_code = 400
    default_message = "Invalid file content format."


class ConfigurationError(ResumeAIError):
    status_code = 500
    default_message = "Please set your Gemini API key in .env.local (currently using placeholder)"


class EmptyResponseError(ResumeAIError):
    status_code = 502
    default_message = "Empty response from AI."


class MalformedResponseError(ResumeAIError):
    status_code = 502
    default_message = "The AI returned a response that could not be read. Please try again."


class RejectedRequestError(ResumeAIError):
    status_code = 422
    default_message = (
        "The document could not be processed. Ensure the file is a valid PDF or clear image under 10MB."
    )


class UnknownError(ResumeAIError):
    status_code = 502
    default_message = "Failed to analyze document."
