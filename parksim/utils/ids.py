"""Per-run vehicle identifiers."""


class VehicleIdSequence:
    """Issues ``V-1``, ``V-2``, ... for vehicles that get a space.

    Owned by one simulation run rather than shared process-wide, so two
    runs with the same seed hand out the same ids.
    """

    def __init__(self, prefix: str = "V"):
        self.prefix = prefix
        self._counter = 0

    def next(self) -> str:
        self._counter += 1
        return f"{self.prefix}-{self._counter}"

    def peek(self) -> str:
        return f"{self.prefix}-{self._counter + 1}"

    def reset(self) -> None:
        self._counter = 0
