# SPDX-License-Identifier: LGPL-3.0-or-later
import logging


class FakeLogger:
    def __init__(self):
        self.records = []
        self.contexts = []

    def _log(self, level, msg, *a, **k):
        self.records.append((level, str(msg % a) if a else str(msg)))
        self.contexts.append(((k.get("extra") or {}).get("ctx") or {}))

    def info(self, msg, *a, **k): self._log("info", msg, *a, **k)
    def warning(self, msg, *a, **k): self._log("warning", msg, *a, **k)
    def error(self, msg, *a, **k): self._log("error", msg, *a, **k)
    def debug(self, msg, *a, **k): self._log("debug", msg, *a, **k)

    def log(self, level, msg, *a, **k):
        self._log(logging.getLevelName(level).lower(), msg, *a, **k)

    def isEnabledFor(self, _lvl):
        return True

    def messages(self, level):
        return [m for lvl, m in self.records if lvl == level]

    def context(self, level):
        return [ctx for (lvl, _m), ctx in zip(self.records, self.contexts) if lvl == level]
