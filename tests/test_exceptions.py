from radiology_ai.utils.exceptions import (
    AnalysisException,
    ConfigurationException,
    FetchFailed,
    InvalidPredictionSet,
    InvalidSelection,
    ValidationException,
    format_user_error,
)

def test_str_includes_details():
    error = FetchFailed("Analysis failed", "HTTP 502")
    
    assert str(error) == "Analysis failed\nDetails: HTTP 502"
    assert error.message == "Analysis failed"

def test_str_without_details():
    assert str(InvalidSelection("Unknown class")) == "Unknown class"

def test_hierarchy():
    for cls in (FetchFailed, InvalidPredictionSet, InvalidSelection, ValidationException, ConfigurationException):
        assert issubclass(cls, AnalysisException)
    assert issubclass(InvalidPredictionSet, FetchFailed)
    assert not issubclass(InvalidSelection, FetchFailed)

def test_format_user_error():
    assert format_user_error("unknown_label", label="Edema") == 'Class "Edema" is not part of the current analysis.'
    assert format_user_error("no_such_key") == "An unexpected error occurred."
