"""
Calibration error types.

Both errors are local and synchronous: they are raised to the immediate
caller and the session is recovered with ``reset()``.
"""


class CalibrationError(Exception):
    """Base class for calibration failures."""


class DegenerateConfiguration(CalibrationError):
    """The four calibration points cannot define a projective transform."""


class IncompleteCalibration(CalibrationError):
    """An operation needs a finished calibration but fewer than 4 points exist."""
