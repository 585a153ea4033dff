# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/core/logger.py
"""
Logging for the vmi2domain CLI.

Library modules log under `vmi2domain.*` and never install handlers;
`Log.setup()` configures the project logger once per process. Conversion
code attaches the VMI/interface it is working on through `Log.bind()`:

    log = Log.bind(logger, vmi="testvmi")
    log.bind(iface="default", code="model-downgraded").warning("...")

which renders as

    12:00:01 ⚠️ WARNING  ... [code=model-downgraded iface=default vmi=testvmi]
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple

from termcolor import colored as _colored

TRACE = 5
if not hasattr(logging, "TRACE"):
    logging.TRACE = TRACE  # type: ignore[attr-defined]
    logging.addLevelName(TRACE, "TRACE")


def _logger_trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _logger_trace  # type: ignore[attr-defined]

# levelname -> (emoji, color)
_LEVELS = {
    "TRACE": ("🧬", "cyan"),
    "DEBUG": ("🔍", "blue"),
    "INFO": ("✅", "green"),
    "WARNING": ("⚠️", "yellow"),
    "ERROR": ("💥", "red"),
    "CRITICAL": ("🧨", "red"),
}


def c(text: str, color: Optional[str] = None, attrs: Optional[List[str]] = None, *, enable: bool = True) -> str:
    """Colorize text when enabled."""
    if not enable or not color:
        return text
    return _colored(text, color=color, attrs=attrs or [])


def _stderr_is_tty() -> bool:
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def _stderr_takes_emoji() -> bool:
    enc = getattr(sys.stderr, "encoding", None) or "utf-8"
    try:
        "✅".encode(enc)
    except (UnicodeEncodeError, LookupError):
        return False
    return True


def _record_ctx(record: logging.LogRecord) -> Dict[str, str]:
    ctx = getattr(record, "ctx", None) or {}
    return {str(k): " ".join(str(v).split()) for k, v in sorted(ctx.items(), key=lambda kv: str(kv[0]))}


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Adapter carrying a context dict (vmi, iface, ...) into every record as `record.ctx`."""

    def __init__(self, logger: Any, ctx: Optional[Mapping[str, Any]] = None):
        super().__init__(logger, extra={"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["ctx"] = {**self.extra["ctx"], **(extra.get("ctx") or {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **ctx: Any) -> "ContextLoggerAdapter":
        return ContextLoggerAdapter(self.logger, {**self.extra["ctx"], **ctx})


@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    emoji: bool = True
    # file logs: milliseconds plus logger name and source line
    detailed: bool = False
    utc: bool = False


class EmojiFormatter(logging.Formatter):
    def __init__(self, style: LogStyle):
        super().__init__()
        self._style = style

    def format(self, record: logging.LogRecord) -> str:
        st = self._style
        tz = _dt.timezone.utc if st.utc else None
        ts = _dt.datetime.fromtimestamp(record.created, tz=tz)
        stamp = ts.strftime("%H:%M:%S.%f")[:-3] if st.detailed else ts.strftime("%H:%M:%S")

        emoji, color = _LEVELS.get(record.levelname, ("•", None))
        if not st.emoji:
            emoji = "·"
        paint = st.color and _stderr_is_tty()

        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, color, ["bold"], enable=paint)

        where = f" [{record.name} {record.module}:{record.lineno}]" if st.detailed else ""
        ctx = _record_ctx(record)
        ctx_s = " [" + " ".join(f"{k}={v}" for k, v in ctx.items()) + "]" if ctx else ""

        line = f"{stamp} {emoji} {c(record.levelname, color, enable=paint):<8}{where} {msg}{ctx_s}"
        if record.exc_info:
            line += "\n" + "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line; context keys are merged under "ctx"."""

    def __init__(self, *, utc: bool = True):
        super().__init__()
        self._tz = _dt.timezone.utc if utc else None

    def format(self, record: logging.LogRecord) -> str:
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=self._tz).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        ctx = _record_ctx(record)
        if ctx:
            obj["ctx"] = ctx
        if record.exc_info:
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False)


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """
        default INFO; -q WARNING, -qq ERROR; -vv DEBUG, -vvv TRACE.
        Quiet wins over verbose.
        """
        if quiet:
            return logging.ERROR if quiet >= 2 else logging.WARNING
        if verbose >= 3:
            return TRACE
        return logging.DEBUG if verbose >= 2 else logging.INFO

    @staticmethod
    def bind(logger: Any, **ctx: Any) -> ContextLoggerAdapter:
        if isinstance(logger, ContextLoggerAdapter):
            return logger.bind(**ctx)
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: bool = True,
        utc: bool = False,
        logger_name: str = "vmi2domain",
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        Configure and return the project logger: one stderr handler plus an
        optional file handler (detailed, uncolored). Calling it again replaces
        the handlers. OSError from creating the log file propagates.
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        emoji = _stderr_takes_emoji()
        handlers: List[logging.Handler] = []

        sh = logging.StreamHandler(stream=sys.stderr)
        sh.setFormatter(
            JsonFormatter(utc=utc) if json_logs else EmojiFormatter(LogStyle(color=color, emoji=emoji, utc=utc))
        )
        handlers.append(sh)

        if log_file:
            fp = Path(log_file).expanduser().resolve()
            fp.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(fp, encoding="utf-8")
            fh.setFormatter(
                JsonFormatter(utc=utc)
                if json_logs
                else EmojiFormatter(LogStyle(color=False, emoji=emoji, detailed=True, utc=utc))
            )
            handlers.append(fh)

        for h in handlers:
            h.setLevel(level)
            logger.addHandler(h)

        logger.debug("Logging at %s", logging.getLevelName(level))
        return logger


__all__ = ["TRACE", "c", "ContextLoggerAdapter", "LogStyle", "EmojiFormatter", "JsonFormatter", "Log"]
