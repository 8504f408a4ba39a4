from __future__ import annotations


class InvalidParameterError(ValueError):
	"""Raised when an input violates a documented constraint.

	`constraint` holds a short machine-readable description of the rule,
	e.g. 'mouth_radius > throat_radius'.
	"""
	def __init__(self, constraint: str, message: str | None = None):
		self.constraint = constraint
		super().__init__(message or f"Invalid parameter: requires {constraint}.")


class UnknownProfileWarning(UserWarning):
	"""Emitted when a profile tag is not recognized and a fallback is used."""
