import json
import logging
from pathlib import Path

from onsitecalc.engine import evaluate
from onsitecalc.utils.logging import configure_json_logger, flush_handlers, log_event


def _read_lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def test_structured_logger_emits_jsonl(tmp_path: Path) -> None:
    log_file = tmp_path / "events.jsonl"
    logger = configure_json_logger(log_file)

    trace_id = log_event(logger, "evaluate.request", expression="5 1/2 + 3 1/4")
    log_event(logger, "evaluate.completed", trace_id=trace_id, display='8 3/4"')
    flush_handlers(logger)

    lines = _read_lines(log_file)
    configure_json_logger(None)

    assert len(lines) == 2
    assert all(line["trace_id"] == trace_id for line in lines)
    assert {line["event"] for line in lines} == {"evaluate.request", "evaluate.completed"}
    assert lines[0]["expression"] == "5 1/2 + 3 1/4"
    assert lines[1]["display"] == '8 3/4"'


def test_engine_warnings_reach_the_project_logger(tmp_path: Path) -> None:
    log_file = tmp_path / "engine.jsonl"
    logger = configure_json_logger(log_file)

    evaluate("5' +")
    flush_handlers(logger)

    lines = _read_lines(log_file)
    configure_json_logger(None)

    assert [line["event"] for line in lines] == ["measurement_evaluation_failed"]
    assert lines[0]["logger"] == "onsitecalc.engine.evaluator"
    assert lines[0]["level"] == "warning"
    assert lines[0]["expression"] == "5' +"
    assert "Dangling operator" in lines[0]["error"]


def test_exceptions_are_written_with_their_traceback(tmp_path: Path) -> None:
    log_file = tmp_path / "errors.jsonl"
    logger = configure_json_logger(log_file)

    try:
        raise ZeroDivisionError("3/8 / 0")
    except ZeroDivisionError:
        logging.getLogger("onsitecalc.service").exception("evaluate.crashed", extra={"expression": "3/8 / 0"})
    flush_handlers(logger)

    lines = _read_lines(log_file)
    configure_json_logger(None)

    assert lines[0]["event"] == "evaluate.crashed"
    assert lines[0]["expression"] == "3/8 / 0"
    assert "ZeroDivisionError" in lines[0]["exception"]


def test_null_handler_when_no_log_path() -> None:
    logger = configure_json_logger(None)
    assert [type(handler) for handler in logger.handlers] == [logging.NullHandler]
