"""Autogram Search.

Finds self-counting sentences ("autograms") that begin with a given preamble and go on
to state, exactly, how many of each letter they contain, e.g.

    this sentence employs two a's, two c's, ..., five y's and one z.

Uses backtracking with lower and upper bounds on every letter count, splitting the
search across worker processes.
"""

from sys import argv, exit

from .preamble import InvalidPreambleError, validate_preamble
from .sentence import render_sentence
from .solver import solver
from .solver.config import config as solver_config
from .solver.parallel import SearchFailedError

NO_SOLUTION_MESSAGE = 'No solution found for preamble "{}".'


def main() -> None:
    """Main entry point for the autogram solver."""
    # Expect the preamble as one or more words
    if len(argv) < 2:
        print("Usage: python -m autogram <preamble words...>")
        exit(1)
    try:
        preamble = validate_preamble(" ".join(argv[1:]), lenient=solver_config.lenient_preamble)
        solutions = solver.run(preamble)
    except InvalidPreambleError as e:
        print(f"Error: {e}")
        exit(2)
    except SearchFailedError as e:
        print(f"Error: {e}")
        exit(3)

    if not solutions:
        print(NO_SOLUTION_MESSAGE.format(preamble))
    for solution in solutions:
        print(render_sentence(solution, preamble))
