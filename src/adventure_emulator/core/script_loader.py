"""Fetch, assemble and invoke hook scripts against a host binding table.

A hook invocation runs two units, the shared library and one hook, inside a
single evaluation namespace. The namespace starts out holding the bindings
the caller registered (``text``, ``state``, ``history`` ...), so hook bodies
use them as plain names. Sources are parsed into syntax trees; no source text
is concatenated or rewritten.

Hooks expose their entry point as ``modifier(text)``. Authors conventionally
end the hook with a bare ``modifier(text)`` call. That trailing statement is
dropped from the parsed tree and the loader calls ``modifier`` itself, so the
entry point runs exactly once and its return value comes back directly.
"""

from __future__ import annotations

import ast
import asyncio
import builtins
import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import CodeType
from typing import Any, Final

from adventure_emulator.core.errors import LoadError, ScriptError, ShapeError
from adventure_emulator.domain.ports import ScriptSource

ENTRY_POINT: Final[str] = "modifier"
_MISSING: Final = object()
# Anything else a hook raises, SystemExit included, becomes a ScriptError.
_PROPAGATE: Final = (asyncio.CancelledError, KeyboardInterrupt)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HookResult:
    """Effective text captured from one `modifier` call plus the raw value."""

    text: str
    raw: object


def _is_entry_point_call(statement: ast.stmt) -> bool:
    if not isinstance(statement, ast.Expr):
        return False
    call = statement.value
    return (
        isinstance(call, ast.Call)
        and isinstance(call.func, ast.Name)
        and call.func.id == ENTRY_POINT
    )


def strip_trailing_entry_call(tree: ast.Module) -> ast.Module:
    """Remove a final top-level `modifier(...)` statement if present."""
    if tree.body and _is_entry_point_call(tree.body[-1]):
        tree.body = tree.body[:-1]
    return tree


def extract_hook_text(value: object, *, location: str | None = None) -> str:
    """Return the text carried by a hook result or raise `ShapeError`.

    Accepted shapes are a plain string, a mapping with a string under
    ``"text"``, or any object whose ``text`` attribute is a string.
    """
    if isinstance(value, str):
        return value
    try:
        if isinstance(value, Mapping):
            candidate = value.get("text", _MISSING)
        else:
            candidate = getattr(value, "text", _MISSING)
    except Exception as exc:
        raise ShapeError(
            f"{location}: reading result text raised {type(exc).__name__}",
            location=location,
            value=value,
        ) from exc
    if isinstance(candidate, str):
        return candidate
    if candidate is _MISSING:
        detail = f"{type(value).__name__} has no text field"
    else:
        detail = f"text field is {type(candidate).__name__}, expected str"
    raise ShapeError(f"{location}: invalid hook result ({detail})", location=location, value=value)


class ScriptLoader:
    """Runs library + hook units and captures the hook's `modifier` result."""

    def __init__(self, source: ScriptSource) -> None:
        self._source = source

    @property
    def source(self) -> ScriptSource:
        return self._source

    async def _fetch(self, location: str) -> str:
        try:
            text = await self._source.fetch(location)
        except Exception as exc:
            raise LoadError(
                f"Failed to load {location}: {type(exc).__name__}: {exc}", location=location
            ) from exc
        if not isinstance(text, str):
            raise LoadError(
                f"Failed to load {location}: source returned {type(text).__name__}",
                location=location,
            )
        return text

    @staticmethod
    def _compile_unit(source: str, *, location: str, strip_entry_call: bool) -> CodeType:
        try:
            tree = ast.parse(source, filename=location, mode="exec")
            if strip_entry_call:
                tree = strip_trailing_entry_call(tree)
            return compile(tree, filename=location, mode="exec")
        except (SyntaxError, ValueError) as exc:
            raise ScriptError(f"{location} failed to compile: {exc}", location=location) from exc

    @staticmethod
    def _new_namespace(bindings: Mapping[str, object]) -> dict[str, Any]:
        namespace: dict[str, Any] = {
            "__builtins__": dict(vars(builtins)),
            "__name__": "__hook__",
        }
        namespace.update(bindings)
        return namespace

    @staticmethod
    def _execute(code: CodeType, namespace: dict[str, Any], *, location: str) -> None:
        try:
            exec(code, namespace)
        except _PROPAGATE:
            raise
        except BaseException as exc:
            raise ScriptError(
                f"{location} raised {type(exc).__name__}: {exc}", location=location
            ) from exc

    async def load(
        self,
        library_location: str,
        hook_location: str,
        bindings: Mapping[str, object],
    ) -> HookResult:
        """Run one hook invocation.

        Raises `LoadError`, `ScriptError` or `ShapeError`; only task
        cancellation and KeyboardInterrupt pass through. Mutations the
        scripts make through `bindings` persist.
        """
        library_source, hook_source = await asyncio.gather(
            self._fetch(library_location),
            self._fetch(hook_location),
        )
        library_code = self._compile_unit(
            library_source, location=library_location, strip_entry_call=False
        )
        hook_code = self._compile_unit(hook_source, location=hook_location, strip_entry_call=True)

        namespace = self._new_namespace(bindings)
        self._execute(library_code, namespace, location=library_location)
        self._execute(hook_code, namespace, location=hook_location)

        modifier = namespace.get(ENTRY_POINT)
        if not callable(modifier):
            raise ScriptError(
                f"{hook_location} does not define a callable {ENTRY_POINT}(text)",
                location=hook_location,
            )
        try:
            value = modifier(bindings.get("text", ""))
            if inspect.isawaitable(value):
                value = await value
        except _PROPAGATE:
            raise
        except BaseException as exc:
            raise ScriptError(
                f"{hook_location} {ENTRY_POINT}() raised {type(exc).__name__}: {exc}",
                location=hook_location,
            ) from exc

        text = extract_hook_text(value, location=hook_location)
        logger.debug("hook.load location=%s chars=%s", hook_location, len(text))
        return HookResult(text=text, raw=value)
