from typing import Sequence

from audionotes.core.exceptions.error_messages import ErrorKey


class AppException(Exception):
    """
        Application-level exception carrying an error key and an HTTP status.

        The error key selects a user-facing message from the error messages
        module. ``error_detail`` is logged server-side and only echoed to the
        client when running in the development environment.

        Args:
            error_key (ErrorKey): Key used to look up the error message.
            status_code (int, optional): HTTP status for the response (default: 400).
            error_detail (str, optional): Diagnostic text, never shown in production.
            error_obj (Exception, optional): Underlying exception, if any.
            error_variables (Sequence[str], optional): Values formatted into the message.

        Example:
            ```python
            raise AppException(ErrorKey.RECORDING_NOT_FOUND, status_code=404)
            ```
        """
    def __init__(self, error_key: ErrorKey, status_code=400, error_detail="", error_obj=None,
                 error_variables: Sequence[str] = ()):
        self.error_key: ErrorKey = error_key
        self.status_code = status_code
        self.error_detail = error_detail
        self.error_obj = error_obj
        self.error_variables = error_variables
        super().__init__(error_key.value)
