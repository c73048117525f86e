"""Search task representation for autogram preambles."""

from datetime import datetime
from time import time

from autogram.preamble import Classification
from autogram.solver.search import SearchFrame, format_alphabet, initial_frame
from autogram.solver.utils import TIMESTAMP_FMT


class TaskArgs:
    """Wrapper for task arguments for the solver.

    Pickleable, so that it can be used with multiprocessing (passed to worker processes).
    """

    def __init__(
        self,
        *,
        classification: Classification,
        frame: SearchFrame | None = None,
    ) -> None:
        """Initialize the task for the given classified preamble.

        Args:
            classification (Classification): The classified preamble.
            frame (SearchFrame | None): Root of the tree to search.  Defaults to the
                initial frame of the preamble.
        """
        self.preamble = classification.preamble
        """The validated preamble."""

        self.base_counts = classification.raw_counts
        """Letter tally of the preamble plus the connective "and"."""

        self.classification = classification.summary()
        """dict summarizing the letter classification."""

        self.frame = frame if frame is not None else initial_frame(classification)
        """Root of the search tree; its first pending letter is split across branches."""

        self.start_time = time()
        """Timestamp when the solver started, in seconds since the epoch."""

    def summary(self) -> dict[str, object]:
        """Return a dictionary-based summary of the task arguments."""
        return {
            "classification": self.classification,
            "root": format_alphabet(self.frame.alphabet),
            "pending": "".join(str(letter) for letter in self.frame.pending),
            "start_time": datetime.fromtimestamp(self.start_time)
            .astimezone()
            .strftime(TIMESTAMP_FMT),
        }
