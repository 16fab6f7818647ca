"""Join counter used to wait for a set of concurrently running analyses."""

import threading


class WaitGroup:
    """
    Counts in-flight units of work and lets callers block until all finish.

    Callers must ``add()`` before the unit is scheduled and the unit must
    call ``done()`` on every exit path, otherwise ``wait()`` never returns.

    Example:
        wg = WaitGroup()
        wg.add(1)
        threading.Thread(target=lambda: (work(), wg.done())).start()
        wg.wait()
    """

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        """Current number of unfinished units."""
        with self._cond:
            return self._count

    def add(self, delta: int = 1) -> None:
        """
        Adjust the counter.

        Args:
            delta: Amount to add (negative to release)

        Raises:
            ValueError: If the counter would become negative
        """
        with self._cond:
            if self._count + delta < 0:
                raise ValueError("negative WaitGroup counter")
            self._count += delta
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        """Mark one unit as finished."""
        self.add(-1)

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until the counter reaches zero.

        Args:
            timeout: Maximum seconds to wait, None waits forever

        Returns:
            True if the counter reached zero, False on timeout
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)
