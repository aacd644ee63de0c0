"""
Custom exception hierarchy for the radiology analysis view.
Provides clear, actionable error messages.
"""

class AnalysisException(Exception):
    """Base exception for all analysis errors"""
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)
    
    def __str__(self):
        if self.details:
            return f"{self.message}\nDetails: {self.details}"
        return self.message


class FetchFailed(AnalysisException):
    """Raised when the inference API call or its response parsing fails"""
    pass


class InvalidPredictionSet(FetchFailed):
    """Raised when an inference response violates the prediction set invariants"""
    pass


class InvalidSelection(AnalysisException):
    """Raised when the view selects a label absent from the loaded prediction set"""
    pass


class ValidationException(AnalysisException):
    """Raised when input validation fails"""
    pass


class ConfigurationException(AnalysisException):
    """Raised when configuration is invalid"""
    pass


# User-friendly error messages
ERROR_MESSAGES = {
    'fetch_failed': 'The AI analysis could not be completed. Please try again later.',
    'invalid_response': 'The AI service returned an incomplete analysis for this image.',
    'empty_image': 'No image is loaded for analysis.',
    'unknown_label': 'Class "{label}" is not part of the current analysis.',
    'no_sample_images': 'No sample images found in {path}.',
    'bad_config_value': 'Invalid configuration value for {key}: {value}.',
}


def format_user_error(error_key: str, **kwargs) -> str:
    """Format user-friendly error message"""
    template = ERROR_MESSAGES.get(error_key, "An unexpected error occurred.")
    return template.format(**kwargs)
