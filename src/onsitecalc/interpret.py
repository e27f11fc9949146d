"""Adapters for the natural-language interpretation service.

Spoken phrases such as "three and a quarter plus five and three eighths" are
turned into expression strings by a remote language model. This module holds
the payload schema returned by that service, HTTP clients to reach it and the
orchestration that evaluates the interpreted expression, falling back to the
raw text when the service is unavailable.
"""
from __future__ import annotations

import asyncio
import json
import logging
import re
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Protocol

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from .config import CalculatorSettings
from .engine import EvaluationFailure, FailureKind, Outcome, evaluate

__all__ = [
    "AsyncHttpInterpreter",
    "HttpInterpreter",
    "InterpretationOutcome",
    "InterpretationPayload",
    "Interpreter",
    "InterpreterConfig",
    "MockInterpreter",
    "ainterpret_and_evaluate",
    "clean_model_content",
    "interpret_and_evaluate",
    "payload_to_expression",
    "resolve_interpretation",
]

LOGGER = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\n?")
_EMPTY_REPLY: Dict[str, Any] = {"mode": "normal", "expression": ""}


class InterpretationPayload(BaseModel):
    """Structured reply of the interpretation service."""

    mode: Optional[Literal["inches", "normal"]] = None
    expression: Optional[str] = None
    a: Optional[str] = None
    op: Optional[str] = None
    b: Optional[str] = None
    error: bool = False

    @classmethod
    def from_response(cls, data: Any) -> "InterpretationPayload":
        """Build a payload from decoded JSON; anything unusable becomes an error payload."""

        if not isinstance(data, dict):
            return cls(error=True)
        if data.get("error"):
            return cls(error=True)
        try:
            return cls.model_validate(data)
        except ValidationError:
            LOGGER.warning("interpretation_payload_invalid", extra={"payload": data})
            return cls(error=True)


class InterpreterConfig(BaseModel):
    """Configuration for interpretation clients."""

    endpoint: Optional[str] = Field(default=None, description="HTTP endpoint accepting {'text': ...} payloads")
    model: Optional[str] = Field(default=None, description="Remote model identifier")
    timeout: float = Field(default=30.0, ge=1.0, description="Timeout for each request in seconds")
    max_retries: int = Field(default=2, ge=0, description="Number of retry attempts on failure")

    @classmethod
    def from_settings(cls, settings: CalculatorSettings) -> "InterpreterConfig":
        return cls(
            endpoint=settings.interpreter_endpoint,
            model=settings.interpreter_model,
            timeout=settings.interpreter_timeout,
            max_retries=settings.interpreter_max_retries,
        )


class Interpreter(Protocol):
    """Protocol implemented by interpretation clients."""

    def interpret(self, text: str) -> InterpretationPayload:
        """Turn a spoken phrase into an :class:`InterpretationPayload`."""


def payload_to_expression(payload: InterpretationPayload) -> Optional[str]:
    """Return the expression string encoded by ``payload``.

    Measurement replies carry ``a``/``op``/``b`` which are joined with single
    spaces; plain replies carry ``expression``.
    """

    triple = (payload.a, payload.op, payload.b)
    has_triple = all(part and part.strip() for part in triple)
    if payload.mode == "inches" and has_triple:
        return " ".join(part.strip() for part in triple)  # type: ignore[union-attr]
    if payload.expression and payload.expression.strip():
        return payload.expression.strip()
    if has_triple:
        return " ".join(part.strip() for part in triple)  # type: ignore[union-attr]
    return None


def clean_model_content(content: str) -> Dict[str, Any]:
    """Parse a model reply that may be wrapped in Markdown code fences."""

    cleaned = _CODE_FENCE.sub("", content).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        return dict(_EMPTY_REPLY)
    if not isinstance(parsed, dict):
        return dict(_EMPTY_REPLY)
    return parsed


def _request_body(text: str, model: Optional[str]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"text": text, "lang": "auto"}
    if model:
        body["model"] = model
    return body


class HttpInterpreter:
    """HTTP client calling the interpretation endpoint."""

    def __init__(self, config: InterpreterConfig):
        if not config.endpoint:
            raise ValueError("HttpInterpreter requires a non-empty endpoint")
        self._config = config

    def interpret(self, text: str) -> InterpretationPayload:
        payload = _request_body(text, self._config.model)
        attempts = self._config.max_retries + 1
        for attempt in range(attempts):
            try:
                body = json.dumps(payload).encode("utf-8")
                request = urllib.request.Request(
                    self._config.endpoint,
                    data=body,
                    method="POST",
                    headers={"Content-Type": "application/json", "Accept": "application/json"},
                )
                with urllib.request.urlopen(request, timeout=self._config.timeout) as response:
                    charset = response.headers.get_content_charset("utf-8")
                    data = response.read().decode(charset)
                return InterpretationPayload.from_response(clean_model_content(data))
            except (urllib.error.URLError, TimeoutError) as exc:
                LOGGER.warning(
                    "interpreter_call_failed",
                    extra={"attempt": attempt + 1, "max_attempts": attempts, "error": str(exc)},
                )
                if attempt + 1 >= attempts:
                    raise
                time.sleep(2 ** attempt)
        raise RuntimeError("Interpreter call failed after retries")


class AsyncHttpInterpreter:
    """Async HTTP client for the interpretation endpoint."""

    def __init__(self, config: InterpreterConfig):
        if not config.endpoint:
            raise ValueError("AsyncHttpInterpreter requires a non-empty endpoint")
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "AsyncHttpInterpreter":
        timeout = aiohttp.ClientTimeout(total=self._config.timeout)
        self._session = aiohttp.ClientSession(timeout=timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def interpret(self, text: str) -> InterpretationPayload:
        if not self._session:
            raise RuntimeError("AsyncHttpInterpreter must be used as async context manager")

        payload = _request_body(text, self._config.model)
        attempts = self._config.max_retries + 1
        for attempt in range(attempts):
            try:
                async with self._session.post(
                    self._config.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json", "Accept": "application/json"},
                ) as response:
                    response.raise_for_status()
                    data = await response.text()
                    return InterpretationPayload.from_response(clean_model_content(data))
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                LOGGER.warning(
                    "async_interpreter_call_failed",
                    extra={"attempt": attempt + 1, "max_attempts": attempts, "error": str(exc)},
                )
                if attempt + 1 >= attempts:
                    raise
                await asyncio.sleep(2 ** attempt)

        raise RuntimeError("Async interpreter call failed after retries")


class MockInterpreter:
    """Offline stand-in returning a fixed payload (an error reply by default)."""

    def __init__(self, payload: Optional[InterpretationPayload] = None):
        self._payload = payload or InterpretationPayload(error=True)

    def interpret(self, text: str) -> InterpretationPayload:
        return self._payload


@dataclass(frozen=True)
class InterpretationOutcome:
    """Evaluation of an interpreted phrase and where its expression came from."""

    result: Outcome
    expression: str
    source: Literal["interpreter", "fallback"]


def _fallback(text: str, reason: str) -> InterpretationOutcome:
    LOGGER.info("interpretation_fallback", extra={"reason": reason})
    return InterpretationOutcome(result=evaluate(text), expression=text.strip(), source="fallback")


def resolve_interpretation(
    text: str,
    payload: Optional[InterpretationPayload],
    *,
    missing_reason: str = "interpreter_error",
) -> InterpretationOutcome:
    """Evaluate ``payload`` for ``text``; ``None`` or unusable payloads fall back to ``text``.

    ``missing_reason`` is the fallback reason logged when ``payload`` is ``None``.
    """

    if payload is None:
        return _fallback(text, missing_reason)
    if payload.error:
        return _fallback(text, "interpreter_error")
    expression = payload_to_expression(payload)
    if expression is None:
        return _fallback(text, "no_expression")
    return InterpretationOutcome(result=evaluate(expression), expression=expression, source="interpreter")


def _empty_outcome(text: str) -> InterpretationOutcome:
    failure = EvaluationFailure(FailureKind.EMPTY_EXPRESSION, text, "Expression is empty")
    return InterpretationOutcome(result=failure, expression="", source="fallback")


def interpret_and_evaluate(text: str, interpreter: Interpreter) -> InterpretationOutcome:
    """Interpret ``text`` remotely and evaluate it, evaluating ``text`` itself on failure."""

    if not text.strip():
        return _empty_outcome(text)
    try:
        payload: Optional[InterpretationPayload] = interpreter.interpret(text)
    except Exception as exc:
        LOGGER.warning("interpreter_unavailable", extra={"error": str(exc)})
        payload = None
    return resolve_interpretation(text, payload)


async def ainterpret_and_evaluate(text: str, interpreter: AsyncHttpInterpreter) -> InterpretationOutcome:
    """Async counterpart of :func:`interpret_and_evaluate`."""

    if not text.strip():
        return _empty_outcome(text)
    try:
        payload: Optional[InterpretationPayload] = await interpreter.interpret(text)
    except Exception as exc:
        LOGGER.warning("interpreter_unavailable", extra={"error": str(exc)})
        payload = None
    return resolve_interpretation(text, payload)
