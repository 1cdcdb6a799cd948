"""Different kinds of simulation errors."""


class SimulationError(Exception):
    code = 100

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)!r})"


class ConfigError(SimulationError, ValueError):
    """Configuration is inconsistent, rejected at construction time."""

    code = 100 + 1


class CausalityError(SimulationError, ValueError):
    """Event was scheduled before the current simulation time."""

    code = 100 + 2

    def __init__(self, time, now):
        super().__init__(
            f"Cannot schedule event at {time} before current time {now}"
        )
        self.time = time
        self.now = now


class ResourceError(SimulationError):
    """Unknown resource class or unit released twice."""

    code = 100 + 3


class ReportError(SimulationError, OSError):
    """Results could not be written to their destination."""

    code = 200

    def __init__(self, path, reason):
        super().__init__(f"Could not write '{path}': {reason}")
        self.path = path
        self.reason = reason


class DispatchError(SimulationError, KeyError):
    """No handler is registered for the event kind."""

    code = 100 + 4

    def __str__(self):
        return str(self.args[0]) if self.args else ""
