import json
from abc import ABC, abstractmethod
from base64 import b64encode
from collections.abc import Iterator
from os import PathLike
from pathlib import Path
from typing import Any, Generic, TypeVar

from ..utils import unquote
from ..utils.files import contentType as guessContentType
from ..utils.primitives import asPrimitive
from .model import UNKNOWN_LENGTH, Message, Response, TPath
from .status import HTTP_STATUS, ResponseCode

T = TypeVar("T")

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def charsetOf(contentType: str | None) -> str | None:
	"""Extracts the `charset` parameter of a content type, if any."""
	if not contentType:
		return None
	for param in contentType.split(";")[1:]:
		name, _, value = param.partition("=")
		if name.strip().lower() == "charset" and value.strip():
			return unquote(value)
	return None


# -----------------------------------------------------------------------------
#
# API
#
# -----------------------------------------------------------------------------

# --
# == HTTP Response API
#
# Defines the high level API functions (orthogonal to the underlying model)
# to create responses.


class ResponseFactory(ABC, Generic[T]):
	@abstractmethod
	def respond(
		self,
		content: Any = None,
		contentType: str | None = None,
		contentLength: int | None = None,
		status: ResponseCode | int = 200,
		headers: dict[str, str] | None = None,
	) -> T: ...

	def empty(
		self,
		status: ResponseCode | int = 200,
		headers: dict[str, str] | None = None,
	) -> T:
		return self.respond(
			content=None,
			contentType=None,
			status=status,
			headers=headers,
		)

	def error(
		self,
		status: ResponseCode | int,
		content: str | None = None,
		contentType: str = "text/plain",
		headers: dict[str, str] | None = None,
	) -> T:
		return self.respond(
			content=HTTP_STATUS.get(status, "Server Error")
			if content is None
			else content,
			contentType=contentType,
			status=status,
			headers=headers,
		)

	def notAuthorized(
		self,
		content: str = "Unauthorized",
		contentType: str = "text/plain",
		*,
		status: ResponseCode | int = 403,
	) -> T:
		return self.error(status, content=content, contentType=contentType)

	def notFound(
		self,
		content: str = "Not Found",
		contentType: str = "text/plain",
		*,
		status: ResponseCode | int = 404,
	) -> T:
		return self.error(status, content=content, contentType=contentType)

	def fail(
		self,
		content: str | None = None,
		*,
		status: ResponseCode | int = 500,
		contentType: str = "text/plain",
	) -> T:
		return self.error(status, content=content, contentType=contentType)

	def redirect(self, url: str, permanent: bool = False) -> T:
		# SEE: https://developer.mozilla.org/en-US/docs/Web/HTTP/Redirections
		return self.empty(
			status=301 if permanent else 302, headers={"Location": str(url)}
		)

	def returns(
		self,
		value: Any,
		headers: dict[str, str] | None = None,
		*,
		status: ResponseCode | int = 200,
		contentType: str = "application/json",
	) -> T:
		if isinstance(value, bytes):
			try:
				value = value.decode("ascii")
			except UnicodeDecodeError:
				value = f"base64:{b64encode(value).decode('ascii')}"
		payload: bytes = json.dumps(asPrimitive(value)).encode("utf8")
		return self.respond(
			payload,
			contentType=contentType,
			contentLength=len(payload),
			status=status,
			headers=headers,
		)

	def respondText(
		self,
		content: str | None,
		contentType: str = "text/plain",
		status: ResponseCode | int = 200,
		headers: dict[str, str] | None = None,
	) -> T:
		return self.respond(
			content=content, contentType=contentType, status=status, headers=headers
		)

	def respondFile(
		self,
		path: TPath,
		contentType: str | None = None,
		status: ResponseCode | int = 200,
		headers: dict[str, str] | None = None,
	) -> T:
		return self.respond(
			content=Path(path),
			contentType=contentType or guessContentType(path),
			status=status,
			headers=headers,
		)


class Responses(ResponseFactory[Response]):
	"""Creates responses for a given protocol version, dispatching the
	content to the matching `Response` factory:

	- `None` gives no body,
	- `str` is encoded with the `charset` of the content type, or the
	  default encoding,
	- `bytes`, `bytearray` and `memoryview` are used as-is,
	- paths are opened as files,
	- objects with a `read` method are streamed, with `contentLength` as
	  their length if given,
	- generators and iterators are streamed chunk by chunk.
	"""

	__slots__ = ["version"]

	def __init__(self, version: str = Message.HTTP_VERSION):
		self.version: str = version

	def respond(
		self,
		content: Any = None,
		contentType: str | None = None,
		contentLength: int | None = None,
		status: ResponseCode | int = 200,
		headers: dict[str, str] | None = None,
	) -> Response:
		code: ResponseCode = ResponseCode.Ensure(status)
		length: int | None = UNKNOWN_LENGTH if contentLength is None else contentLength
		res: Response
		if content is None:
			res = Response.Of(code, version=self.version)
		elif isinstance(content, str):
			res = Response.OfText(
				code, content, charsetOf(contentType), version=self.version
			)
		elif isinstance(content, (bytes, bytearray, memoryview)):
			res = Response.OfBytes(code, content, version=self.version)
		elif isinstance(content, PathLike):
			res = Response.OfFile(code, content, version=self.version)
		elif callable(getattr(content, "read", None)):
			res = Response.OfStream(code, content, length, version=self.version)
		elif isinstance(content, Iterator):
			res = Response.OfIterator(code, content, length, version=self.version)
		else:
			raise ValueError(f"Unsupported content {type(content)}:{content}")
		if headers:
			res.setHeaders(dict(headers))
		if contentType is not None:
			res.setHeader("Content-Type", contentType)
		if res.hasBody and res.length is not None:
			res.setHeader("Content-Length", res.length)
		return res


# EOF
