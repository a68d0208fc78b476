"""Tests for session status-line renderers."""

from telnetctl.output.renderers import render_result
from telnetctl.services.result import ServiceError, ServiceResult


class TestStatusLines:
    def test_resolve_is_attempt_line(self) -> None:
        result = ServiceResult(
            ok=True,
            op="resolve",
            data={"host": "localhost", "port": 23, "endpoint": "127.0.0.1:23"},
        )
        assert render_result(result) == "Trying 127.0.0.1:23..."

    def test_connect_is_success_line(self) -> None:
        result = ServiceResult(
            ok=True, op="connect", data={"endpoint": "[::1]:23"}, meta={"duration_ms": 1.5}
        )
        assert render_result(result) == "Connected to [::1]:23."

    def test_connect_verbose_shows_timing(self) -> None:
        result = ServiceResult(
            ok=True, op="connect", data={"endpoint": "127.0.0.1:23"}, meta={"duration_ms": 1.5}
        )
        output = render_result(result, verbose=True)
        assert output.splitlines()[0] == "Connected to 127.0.0.1:23."
        assert "duration_ms: 1.5" in output

    def test_relay_is_closure_line(self) -> None:
        result = ServiceResult(
            ok=True,
            op="relay",
            data={"reason": "peer_closed", "bytes_sent": 3, "bytes_received": 9},
        )
        assert render_result(result) == "Connection closed."

    def test_relay_verbose_shows_reason_and_counters(self) -> None:
        result = ServiceResult(
            ok=True,
            op="relay",
            data={"reason": "local_empty_line", "bytes_sent": 3, "bytes_received": 9},
        )
        output = render_result(result, verbose=True)
        assert "reason: local_empty_line" in output
        assert "bytes_sent: 3" in output
        assert "bytes_received: 9" in output


class TestErrors:
    def test_long_message_is_one_line(self) -> None:
        message = f"Could not resolve {'a' * 150}.example:23: Name or service not known"
        result = ServiceResult(
            ok=False,
            op="resolve",
            error=ServiceError(code="RESOLUTION_ERROR", message=message),
        )
        assert render_result(result) == f"ERROR  resolve — {message}"

    def test_error_line(self) -> None:
        result = ServiceResult(
            ok=False,
            op="connect",
            error=ServiceError(
                code="CONNECT_TIMEOUT",
                message="Connection to 10.0.0.1:23 timed out after 3s",
                detail={"endpoint": "10.0.0.1:23", "timeout": 3},
            ),
        )
        output = render_result(result)
        assert output == "ERROR  connect — Connection to 10.0.0.1:23 timed out after 3s"

    def test_error_verbose_shows_code_and_detail(self) -> None:
        result = ServiceResult(
            ok=False,
            op="resolve",
            error=ServiceError(
                code="RESOLUTION_ERROR",
                message="Could not resolve nowhere.invalid:23",
                detail={"host": "nowhere.invalid"},
            ),
        )
        output = render_result(result, verbose=True)
        assert "code: RESOLUTION_ERROR" in output
        assert "host: nowhere.invalid" in output

    def test_message_is_not_parsed_as_markup(self) -> None:
        result = ServiceResult(
            ok=False,
            op="connect",
            error=ServiceError(code="CONNECT_ERROR", message="failed: [bold]odd[/bold]"),
        )
        assert "[bold]odd[/bold]" in render_result(result)

    def test_missing_error_payload(self) -> None:
        result = ServiceResult(ok=False, op="connect")
        assert "Unknown error" in render_result(result)


class TestGeneric:
    def test_unknown_op_falls_back(self) -> None:
        result = ServiceResult(ok=True, op="ping", data={"answer": 42})
        output = render_result(result)
        assert output.splitlines()[0] == "OK  ping"
        assert "answer: 42" in output
