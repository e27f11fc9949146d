
from __future__ import annotations

import logging
import threading
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .._version import __version__
from ..config import CalculatorSettings, get_settings
from ..engine import EvaluationFailure, Outcome, evaluate
from ..interpret import (
    AsyncHttpInterpreter,
    InterpretationOutcome,
    InterpreterConfig,
    ainterpret_and_evaluate,
    resolve_interpretation,
)
from ..utils.logging import LOGGER_NAME, configure_json_logger, log_event

APP_VERSION = __version__

LOGGER = logging.getLogger(f"{LOGGER_NAME}.service")

# ---- FastAPI app ----
app = FastAPI(title="onsitecalc API", version=APP_VERSION)


# ---- Logging configured once per process ----
_logging_lock = threading.Lock()
_state = {"logging": False}


def _configure_logging_once(settings: CalculatorSettings) -> None:
    with _logging_lock:
        if _state["logging"]:
            return
        if settings.log_path is not None:
            configure_json_logger(settings.log_path, level=settings.log_level)
        _state["logging"] = True


class EvaluateIn(BaseModel):
    expression: str = Field(..., description="Raw expression, e.g. 5 1/2 + 3 1/4")


class InterpretIn(BaseModel):
    text: str = Field(..., description="Speech transcript to interpret")


class EvaluateOut(BaseModel):
    ok: bool
    expression: str
    value: Optional[float] = None
    feet_inches: str
    total_inches: str
    measurement: bool = False
    error: Optional[str] = None


class InterpretOut(EvaluateOut):
    source: str
    expression_used: str


def _check_length(text: str, settings: CalculatorSettings) -> str:
    stripped = text.strip()
    if not stripped:
        raise HTTPException(status_code=400, detail="Missing text")
    if len(stripped) > settings.max_expression_length:
        raise HTTPException(status_code=400, detail="Text too long")
    return stripped


def _to_out(result: Outcome, expression: str) -> EvaluateOut:
    if isinstance(result, EvaluationFailure):
        return EvaluateOut(
            ok=False,
            expression=expression,
            feet_inches=result.display,
            total_inches=result.display,
            error=result.kind.value,
        )
    data = result.as_dict()
    return EvaluateOut(
        ok=True,
        expression=expression,
        value=data["value"],
        feet_inches=result.feet_inches,
        total_inches=result.total_inches,
        measurement=result.measurement,
    )


def _build_interpreter(settings: CalculatorSettings) -> Optional[AsyncHttpInterpreter]:
    if not settings.interpreter_endpoint:
        return None
    return AsyncHttpInterpreter(InterpreterConfig.from_settings(settings))


@app.get("/health")
def health():
    settings = get_settings()
    return {
        "status": "ok",
        "version": APP_VERSION,
        "limits": {"max_expression_length": settings.max_expression_length},
        "interpreter": bool(settings.interpreter_endpoint),
    }


@app.post("/evaluate", response_model=EvaluateOut)
def evaluate_expression(payload: EvaluateIn) -> EvaluateOut:
    settings = get_settings()
    _configure_logging_once(settings)
    expression = _check_length(payload.expression, settings)
    trace_id = log_event(LOGGER, "evaluate.request", expression=expression)
    result = evaluate(expression)
    log_event(LOGGER, "evaluate.completed", trace_id=trace_id, ok=result.ok, display=result.display)
    return _to_out(result, expression)


@app.post("/interpret", response_model=InterpretOut)
async def interpret_text(payload: InterpretIn) -> InterpretOut:
    settings = get_settings()
    _configure_logging_once(settings)
    text = _check_length(payload.text, settings)
    trace_id = log_event(LOGGER, "interpret.request", text=text)

    interpreter = _build_interpreter(settings)
    outcome: InterpretationOutcome
    if interpreter is None:
        outcome = resolve_interpretation(text, None, missing_reason="no_interpreter")
    else:
        async with interpreter:
            outcome = await ainterpret_and_evaluate(text, interpreter)

    log_event(
        LOGGER,
        "interpret.completed",
        trace_id=trace_id,
        source=outcome.source,
        expression=outcome.expression,
        ok=outcome.result.ok,
    )
    out = _to_out(outcome.result, text)
    return InterpretOut(**out.model_dump(), source=outcome.source, expression_used=outcome.expression)
