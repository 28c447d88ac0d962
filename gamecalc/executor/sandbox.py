"""
Isolated execution of calculation snippets.

Snippets are JavaScript and run inside an embedded QuickJS virtual machine
(the ``quickjs`` extension module), one fresh interpreter per call, with a
memory ceiling and a time limit enforced by the interpreter's interrupt
handler. Nothing from the host process is exposed to the guest: the data
payload crosses the boundary as JSON literals and the result comes back the
same way.

Per call the executor moves through::

    Received -> Validating -> Rejected
                           -> Initializing -> Evaluating -> Succeeded | Failed | TimedOut -> Disposed

Every failure is reported as an ``ExecutionResult``; no exception leaves
``SandboxExecutor.execute``.
"""

import asyncio
import contextlib
import importlib
import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional

from .runtime import RETURN_OUTSIDE_FUNCTION, compose_program, reserved_fields
from .validator import validate_code

log = logging.getLogger(__name__)

MAX_EXECUTION_TIME_MS = 5000
MEMORY_LIMIT_BYTES = 10 * 1024 * 1024
MAX_STACK_SIZE_BYTES = 1024 * 1024

ENGINE_MODULE = "quickjs"


class CodeExecutionError(Exception):
    """Base class for snippet execution failures."""


class ValidationError(CodeExecutionError):
    """Snippet or payload rejected before an interpreter was created."""


class EvaluationError(CodeExecutionError):
    """Snippet raised inside the interpreter."""


class ExecutionTimeoutError(CodeExecutionError):
    """Snippet exceeded its time budget."""


class EngineInitializationError(CodeExecutionError):
    """The interpreter engine module could not be loaded."""


@dataclass
class ExecutionResult:
    success: bool
    value: Any = None
    error: Optional[str] = None
    execution_time: Optional[int] = None


class EngineLoader:
    """
    Process-wide handle to the interpreter engine module.

    The module is imported at most once. Concurrent first callers block on the
    same lock and all receive the single loaded module. A failed import is not
    remembered; the next caller tries again.
    """

    def __init__(self, module_name: str = ENGINE_MODULE):
        self.module_name = module_name
        self._lock = threading.Lock()
        self._module = None

    @property
    def loaded(self) -> bool:
        return self._module is not None

    def load(self):
        module = self._module
        if module is not None:
            return module
        with self._lock:
            if self._module is None:
                try:
                    self._module = importlib.import_module(self.module_name)
                except ImportError as e:
                    log.error("Sandbox engine '%s' failed to load: %s", self.module_name, e)
                    raise EngineInitializationError(f"Engine initialization failed: {e}") from e
                log.info("Sandbox engine '%s' loaded", self.module_name)
            return self._module

    async def acquire(self):
        if self._module is not None:
            return self._module
        return await asyncio.to_thread(self.load)


engine_loader = EngineLoader()


_live_lock = threading.Lock()
_live_interpreters = 0


def live_interpreter_count() -> int:
    return _live_interpreters


def _track(delta: int) -> None:
    global _live_interpreters
    with _live_lock:
        _live_interpreters += delta


@contextlib.contextmanager
def isolated_interpreter(engine, memory_limit_bytes: int, timeout_ms: int) -> Iterator[Any]:
    """One bounded interpreter instance, released on every exit path."""
    ctx = engine.Context()
    _track(1)
    try:
        ctx.set_memory_limit(memory_limit_bytes)
        ctx.set_max_stack_size(MAX_STACK_SIZE_BYTES)
        ctx.set_time_limit(timeout_ms / 1000.0)
        yield ctx
    finally:
        ctx.gc()
        del ctx
        _track(-1)


def _describe(exc: BaseException) -> str:
    text = str(exc).strip()
    if not text:
        return repr(exc)
    # quickjs appends the guest stack trace after the message line
    return text.splitlines()[0]


def _to_python(engine, value: Any) -> Any:
    if isinstance(value, engine.Object):
        try:
            return json.loads(value.json())
        except (TypeError, ValueError):
            return None
    return value


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class SandboxExecutor:
    def __init__(
        self,
        loader: Optional[EngineLoader] = None,
        timeout_ms: int = MAX_EXECUTION_TIME_MS,
        memory_limit_bytes: int = MEMORY_LIMIT_BYTES,
    ):
        self.loader = loader or engine_loader
        self.timeout_ms = timeout_ms
        self.memory_limit_bytes = memory_limit_bytes

    def timeout_message(self) -> str:
        return f"Execution timeout: exceeded {self.timeout_ms}ms"

    def check(self, code: Any, data: Any) -> None:
        if code is not None and not isinstance(code, str):
            raise ValidationError("Validation failed: code must be a string")
        validation = validate_code(code)
        if not validation.valid:
            raise ValidationError(f"Validation failed: {', '.join(validation.errors)}")
        if data is not None and not isinstance(data, Mapping):
            raise ValidationError("Validation failed: data must be an object")
        clashes = reserved_fields(data)
        if clashes:
            names = ", ".join(f"'{n}'" for n in clashes)
            raise ValidationError(f"Validation failed: data field {names} is reserved for a helper function")

    def _evaluate(self, engine, ctx, code: str, data: Optional[Mapping[str, Any]]) -> Any:
        try:
            return ctx.eval(compose_program(code, data))
        except engine.JSException as e:
            # A top-level return only parses inside a function body. Nothing
            # ran when parsing failed, so the same interpreter is reused.
            if RETURN_OUTSIDE_FUNCTION not in _describe(e):
                raise
        return ctx.eval(compose_program(code, data, as_function=True))

    def run(self, engine, code: str, data: Optional[Mapping[str, Any]]) -> Any:
        """Evaluate synchronously in a fresh interpreter. Raises CodeExecutionError subclasses."""
        with isolated_interpreter(engine, self.memory_limit_bytes, self.timeout_ms) as ctx:
            try:
                return _to_python(engine, self._evaluate(engine, ctx, code, data))
            except MemoryError as e:
                raise EvaluationError(f"Memory limit exceeded: {self.memory_limit_bytes} bytes") from e
            except engine.JSException as e:
                message = _describe(e)
                if "interrupted" in message:
                    raise ExecutionTimeoutError(self.timeout_message()) from e
                if "out of memory" in message:
                    raise EvaluationError(f"Memory limit exceeded: {self.memory_limit_bytes} bytes") from e
                raise EvaluationError(message) from e

    async def execute(self, code: str, data: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
        try:
            self.check(code, data)
        except ValidationError as e:
            log.info("Snippet rejected: %s", e)
            return ExecutionResult(success=False, error=str(e))

        started = time.monotonic()
        try:
            engine = await self.loader.acquire()
            started = time.monotonic()
            value = await asyncio.to_thread(self.run, engine, code, data)
        except CodeExecutionError as e:
            elapsed = _elapsed_ms(started)
            log.info("Snippet failed after %dms: %s", elapsed, e)
            return ExecutionResult(success=False, error=str(e), execution_time=elapsed)
        except Exception as e:
            elapsed = _elapsed_ms(started)
            log.exception("Unexpected sandbox failure")
            return ExecutionResult(success=False, error=_describe(e), execution_time=elapsed)

        elapsed = _elapsed_ms(started)
        if elapsed > self.timeout_ms:
            log.warning("Snippet returned after %dms, over the %dms budget", elapsed, self.timeout_ms)
            return ExecutionResult(success=False, error=self.timeout_message(), execution_time=elapsed)

        log.info("Snippet succeeded in %dms", elapsed)
        return ExecutionResult(success=True, value=value, execution_time=elapsed)


_default_executor = SandboxExecutor()


async def execute_safely(code: str, data: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
    return await _default_executor.execute(code, data)
