from typing import Any, Dict, Optional


class FeedbackAppError(Exception):
    """Base class for errors that are reported to the client as a JSON body."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        debug: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.debug = debug
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.debug is not None:
            body["debug"] = self.debug
        if self.field is not None:
            body["field"] = self.field
        return body


class ConfigurationMissingError(FeedbackAppError):
    """A credential required for an upstream call is not configured."""

    status_code = 500


class ValidationFailedError(FeedbackAppError):
    status_code = 400


class UpstreamRefusalError(FeedbackAppError):
    """The model explicitly declined to answer."""

    status_code = 400


class UpstreamEmptyError(FeedbackAppError):
    """The model answered but no usable text could be extracted."""

    status_code = 500


class UpstreamFailureError(FeedbackAppError):
    """Network or API error while talking to the model provider."""

    status_code = 500


class NotFoundError(FeedbackAppError):
    status_code = 404


class InvalidTransitionError(FeedbackAppError):
    status_code = 409


class RecordingInProgressError(FeedbackAppError):
    status_code = 409
