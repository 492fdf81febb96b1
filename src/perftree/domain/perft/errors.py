from __future__ import annotations


class PerftreeError(RuntimeError):
    """Base class for errors reported to the user without ending the session."""

    code: str = "perftree_error"


class InvalidPositionError(PerftreeError):
    code = "invalid_position"


class InvalidMoveError(PerftreeError):
    code = "invalid_move"

    def __init__(self, token: str, reason: str | None = None) -> None:
        message = f"invalid move {token!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.token = token


class InvalidDepthError(PerftreeError):
    code = "invalid_depth"


class EmptyMoveListError(PerftreeError):
    code = "empty_move_list"


class UnknownCommandError(PerftreeError):
    code = "unknown_command"

    def __init__(self, command: str) -> None:
        super().__init__(f"unknown command {command!r}")
        self.command = command


class ProviderFailure(PerftreeError):
    """An external provider terminated abnormally or could not be run."""

    code = "provider_failure"

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        exit_code: int | None = None,
        signal: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.exit_code = exit_code
        self.signal = signal
        self.stderr = stderr


class MalformedLineError(PerftreeError):
    code = "malformed_line"

    def __init__(self, line_number: int, text: str, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}: {text!r}")
        self.line_number = line_number
        self.text = text
        self.reason = reason


class MalformedOutputError(PerftreeError):
    code = "malformed_output"

    def __init__(self, reason: str) -> None:
        super().__init__(f"malformed output: {reason}")
        self.reason = reason


__all__ = [
    "EmptyMoveListError",
    "InvalidDepthError",
    "InvalidMoveError",
    "InvalidPositionError",
    "MalformedLineError",
    "MalformedOutputError",
    "PerftreeError",
    "ProviderFailure",
    "UnknownCommandError",
]
