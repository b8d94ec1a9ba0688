"""Typed failures raised at the external-collaborator boundary."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class UpstreamError(Exception):
	"""A collaborator was unreachable, timed out, or answered with an error status."""

	code: str
	detail: str
	status_code: int = 502

	def __str__(self) -> str:
		return f"{self.code}: {self.detail}"


@dataclass
class MalformedResponseError(UpstreamError):
	"""The collaborator answered, but not in a shape we can use."""

	code: str = "malformed_response"
	detail: str = "Upstream response had an unexpected shape"
