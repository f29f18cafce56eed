"""Top-level name bindings made by `let` statements.

An Environment is the only shared mutable state of an interpreter run. It is guarded by a reader/writer lock:
`define` takes the write side, `snapshot` (used by every `eval`) takes the read side and copies the bindings, so an
evaluation always reduces against the bindings as they were when it started.
"""

from contextlib import contextmanager
import threading


class ReadWriteLock:
    """One writer or any number of readers. Writers waiting for the lock block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        """Shared access."""
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        """Exclusive access."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class Environment:
    """Mapping of name: λ-term. Grows monotonically; redefining a name replaces its binding."""

    def __init__(self, bindings=None):
        self._lock = ReadWriteLock()
        self._bindings = dict(bindings) if bindings else {}

    def define(self, name, term):
        """Binds name to term, replacing any previous binding."""
        with self._lock.write():
            self._bindings[name] = term

    def snapshot(self):
        """Returns a copy of the current bindings."""
        with self._lock.read():
            return dict(self._bindings)

    def get(self, name, default=None):
        with self._lock.read():
            return self._bindings.get(name, default)

    def names(self):
        """Bound names, in order of first definition."""
        with self._lock.read():
            return list(self._bindings)

    def names_of(self, term):
        """Names bound to a term equal to term up to renaming of bound variables, in order of first definition."""
        with self._lock.read():
            return [name for name, bound in self._bindings.items() if bound.alpha_equals(term)]

    def __contains__(self, name):
        with self._lock.read():
            return name in self._bindings

    def __len__(self):
        with self._lock.read():
            return len(self._bindings)

    def __repr__(self):
        return f"Environment({self.names()})"
