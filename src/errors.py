"""Error types shared by the planner modules.

Every error derives from PlannerError so the REPL can catch a single type,
print the message and redraw. None of them is fatal to the process.
"""


class PlannerError(Exception):
    """Base class for all planner errors."""


class ValidationError(PlannerError):
    """Bad user input (empty field, malformed date, end before start)."""


class NotFoundError(PlannerError):
    """No task with the requested id."""


class ParseError(PlannerError):
    """A date string could not be parsed."""


class ComputationError(PlannerError):
    """The timeline span came out non-positive."""


class AdapterError(PlannerError):
    """Task generation failed; message is meant for the user."""


class PersistenceError(PlannerError):
    """Loading or saving the task file failed."""
