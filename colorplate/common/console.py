"""Process-wide state shared by extraction workers.

Output from concurrent workers goes through one lock so a line is never
interleaved with another. The extracted counter is lock-protected too.
"""

import sys
import threading


class Console:
    def __init__(self, out=None, err=None, quiet=False):
        self._out = out
        self._err = err
        self._lock = threading.Lock()
        self.quiet = quiet

    def info(self, message):
        """Progress line on stdout; suppressed when quiet."""
        if self.quiet:
            return
        with self._lock:
            print(message, file=self._out or sys.stdout, flush=True)

    def error(self, message):
        with self._lock:
            print(message, file=self._err or sys.stderr, flush=True)

    def summary(self, message):
        with self._lock:
            print(message, file=self._out or sys.stdout, flush=True)


class Counter:
    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def increment(self):
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self):
        with self._lock:
            return self._value


class ExtractContext:
    """Console plus extracted-count, created once per run."""

    def __init__(self, console=None):
        self.console = console or Console()
        self.extracted = Counter()
