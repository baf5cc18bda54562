"""
Errors raised while running code on the remote judge.

``UnsupportedLanguage`` and ``ExecutionFailed`` are client errors (HTTP 400).
The rest mean the judge could not be reached or misbehaved (HTTP 500).
None of them are retried: the caller has to send a new request.
"""


class ExecutionError(Exception):
    """Base class for everything the execution orchestrator raises."""


class UnsupportedLanguage(ExecutionError):
    def __init__(self, language: str, supported: list[str]):
        self.language = language
        self.supported = supported
        super().__init__(
            f"Unsupported language: {language}. "
            f"Supported languages: {', '.join(supported)}"
        )


class SubmissionFailed(ExecutionError):
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Judge0 submission failed: {status_code} - {body}")


class PollFailed(ExecutionError):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Judge0 result fetch failed: {status_code}")


class ExecutionTimeout(ExecutionError):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__("Execution timeout - code took too long to execute")


class MalformedResponse(ExecutionError):
    """The judge answered 2xx but the body is not what the API documents."""


class ExecutionFailed(ExecutionError):
    """The program ran to a terminal status other than Accepted."""

    def __init__(self, error: str, status_id: int | None = None):
        self.error = error
        self.status_id = status_id
        super().__init__(error)
