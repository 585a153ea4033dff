# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _one_line(s: str, limit: int = 600) -> str:
    s = " ".join((s or "").split())
    return s if len(s) <= limit else s[: limit - 3] + "..."


def _format_context_compact(ctx: Dict[str, Any]) -> str:
    return ", ".join(f"{k}={v!r}" for k, v in sorted(ctx.items()))


@dataclass(eq=False)
class Vmi2DomainError(Exception):
    """
    Root of every vmi2domain error.

    `code` is the process exit status the CLI uses; each conversion error kind
    fixes its own. `context` names the VMI/interface involved and is only
    shown at -v and above.
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.msg = _one_line(self.msg) or self.__class__.__name__
        super().__init__(self.msg)
        self.args = (self.msg,)

    def with_context(self, **ctx: Any) -> "Vmi2DomainError":
        if self.context is None:
            self.context = {}
        self.context.update(ctx)
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        parts = [self.msg]
        if include_context and self.context:
            parts.append(f"[{_format_context_compact(self.context)}]")
        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.msg


class Fatal(Vmi2DomainError):
    """CLI-level failure: unreadable manifest or network-status file, bad config file."""


@dataclass(eq=False)
class ConfigurationError(Vmi2DomainError):
    """Malformed or contradictory spec field. Not retryable."""
    code: int = 2


@dataclass(eq=False)
class NetworkReferenceError(Vmi2DomainError):
    """Dangling name reference between interfaces and networks. Not retryable."""
    code: int = 3


@dataclass(eq=False)
class CapabilityError(Vmi2DomainError):
    """The host lacks a required feature (e.g. /dev/vhost-net)."""
    code: int = 4


@dataclass(eq=False)
class DeviceInfoLookupError(Vmi2DomainError, LookupError):
    """
    Runtime discovery data is missing (vhost-user device info).

    May be transient while the CNI layer is still reporting; callers may retry
    the whole conversion.
    """
    code: int = 5


def wrap_fatal(msg: str, exc: Optional[BaseException] = None, code: int = 1, **context: Any) -> Fatal:
    return Fatal(code=code, msg=msg, cause=exc, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One line for the terminal: the message, plus context at -v and the
    underlying cause at -vv.
    """
    if isinstance(e, Vmi2DomainError):
        return e.user_message(include_context=verbose >= 1, include_cause=verbose >= 2)
    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__
