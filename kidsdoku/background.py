import threading
from concurrent.futures import CancelledError, TimeoutError

from kidsdoku.generator import GenerationCancelled
from kidsdoku.log import get_logger

logger = get_logger(__name__)


class GenerationTask:
    """
    One puzzle generation running on an executor thread.

    The worker only touches its own board arrays; the finished Puzzle is read
    back through result() by whoever owns the session. A cancelled task
    never yields a puzzle, even if the worker finished anyway.
    """

    def __init__(self, config, generator, executor):
        self.config = config
        self._cancel_event = threading.Event()
        self._future = executor.submit(self._run, generator)

    def _run(self, generator):
        try:
            return generator.generate(self.config, cancel_event=self._cancel_event)
        except GenerationCancelled:
            logger.debug("Generation of %dx%d puzzle cancelled", self.config.size, self.config.size)
            return None

    def cancel(self):
        self._cancel_event.set()
        self._future.cancel()

    @property
    def cancelled(self):
        return self._cancel_event.is_set()

    def done(self):
        return self._future.done()

    def wait(self, timeout=None):
        """Blocks until the worker finishes. Returns False on timeout."""
        if self._future.done():
            return True
        try:
            self._future.exception(timeout=timeout)
        except CancelledError:
            return True
        except TimeoutError:
            return False
        return True

    def result(self):
        """The generated Puzzle, or None if not finished, cancelled or failed."""
        if self.cancelled or not self._future.done():
            return None
        error = self._future.exception()
        if error is not None:
            logger.error("Puzzle generation failed: %r", error)
            return None
        return self._future.result()
