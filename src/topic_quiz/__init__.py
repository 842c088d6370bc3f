"""Generate five-question multiple-choice quizzes from a topic."""

__version__ = "0.1.0"
