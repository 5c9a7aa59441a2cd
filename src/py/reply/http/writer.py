from abc import ABC, abstractmethod
from typing import Protocol

from .. import config
from ..utils.codec import BytesTransform, ChunkedEncoder, IdemCodec
from ..utils.logging import exception, warning
from .model import HTTPBody, Response

# --
# == Response writers
#
# Writers drain a response onto an output, choosing the framing from the
# body length: a known length is written as-is after a `Content-Length`
# header, an unknown length uses chunked transfer encoding (or, for
# HTTP/1.0, reads until exhaustion and closes the connection). Writers take
# ownership of the body and close it once written.


class Writable(Protocol):
	def write(self, data: bytes, /) -> int | None: ...


class ResponseWriter(ABC):
	"""A generic response writer, subclasses define where bytes go."""

	__slots__ = ["chunkSize", "shouldClose"]

	def __init__(self, chunkSize: int = config.CHUNK_SIZE) -> None:
		self.chunkSize: int = chunkSize
		self.shouldClose: bool = False

	def write(self, response: Response) -> int:
		"""Writes the head and body of the response, returning the number of
		body bytes written (before any framing)."""
		body: HTTPBody | None = response.body
		headers: dict[str, str] = dict(response.headers)
		try:
			if body is None or not response.code.allowsBody:
				if response.code.allowsBody:
					headers["Content-Length"] = "0"
				self._writeBytes(response.head(headers))
				return 0
			elif response.length is not None:
				headers.pop("Transfer-Encoding", None)
				headers["Content-Length"] = str(response.length)
				self._writeBytes(response.head(headers))
				return self._writeFixed(body, response.length)
			elif response.version == "HTTP/1.0":
				# Chunked encoding is not available, the end of the body is
				# the end of the connection.
				headers.pop("Content-Length", None)
				headers["Connection"] = "close"
				self.shouldClose = True
				self._writeBytes(response.head(headers))
				return self._writeStream(body, IdemCodec())
			else:
				headers.pop("Content-Length", None)
				headers["Transfer-Encoding"] = "chunked"
				self._writeBytes(response.head(headers))
				return self._writeStream(body, ChunkedEncoder())
		except OSError as e:
			raise exception(e, "Could not write response")
		finally:
			response.close()

	def _writeFixed(self, body: HTTPBody, length: int) -> int:
		remaining: int = length
		while remaining > 0:
			chunk = body.read(min(self.chunkSize, remaining))
			if not chunk:
				warning(
					"Response body is shorter than its length",
					Expected=length,
					Written=length - remaining,
				)
				# The connection can't be reused as the peer still expects
				# the missing bytes.
				self.shouldClose = True
				break
			self._writeBytes(chunk)
			remaining -= len(chunk)
		return length - remaining

	def _writeStream(self, body: HTTPBody, transform: BytesTransform) -> int:
		written: int = 0
		for chunk in body.chunks(self.chunkSize):
			self._writeBytes(transform.feed(chunk))
			written += len(chunk)
		self._writeBytes(transform.flush())
		return written

	@abstractmethod
	def _writeBytes(self, chunk: bytes) -> None: ...


class BytesResponseWriter(ResponseWriter):
	"""Accumulates the written response in memory."""

	__slots__ = ["buffer"]

	def __init__(self, chunkSize: int = config.CHUNK_SIZE) -> None:
		super().__init__(chunkSize)
		self.buffer: bytearray = bytearray()

	@property
	def value(self) -> bytes:
		return bytes(self.buffer)

	def _writeBytes(self, chunk: bytes) -> None:
		self.buffer += chunk


class StreamResponseWriter(ResponseWriter):
	"""Writes the response to a binary output, like a socket file."""

	__slots__ = ["output"]

	def __init__(self, output: Writable, chunkSize: int = config.CHUNK_SIZE) -> None:
		super().__init__(chunkSize)
		self.output: Writable = output

	def _writeBytes(self, chunk: bytes) -> None:
		if chunk:
			self.output.write(chunk)


# EOF
