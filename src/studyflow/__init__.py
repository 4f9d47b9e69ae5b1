"""studyflow: spaced-repetition scheduling and study session timers."""

from studyflow.consts import VERSION

__version__ = VERSION
