import os
from abc import ABC, abstractmethod
from codecs import CodecInfo
from os import PathLike
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, ClassVar, Iterable, Iterator, TypeAlias

from mypy_extensions import mypyc_attr

from .. import config
from ..utils.io import Readable, asBytes, encode, iterchunks, lookupEncoding
from ..utils.logging import debug
from .status import ResponseCode

# NOTE: Lengths are stored as `int | None`, `None` meaning that the length
# is not known in advance. The `-1` sentinel is only accepted as an input.
UNKNOWN_LENGTH: int = -1

TPath: TypeAlias = str | PathLike[str]

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def headername(name: str, *, headers: dict[str, str] = {}) -> str:
	"""Normalizes the header name as `Kebab-Case`."""
	if name in headers:
		return headers[name]
	key: str = name.lower()
	if key in headers:
		return headers[key]
	else:
		normalized: str = "-".join(_.capitalize() for _ in name.split("-"))
		headers[key] = normalized
		return normalized


def asLength(length: int | None) -> int | None:
	"""Maps the unknown length sentinel (any negative value) to `None`."""
	return None if length is None or length < 0 else length


# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class ResponseError(Exception):
	"""Base class for the errors raised when building responses."""


class UnsupportedEncodingError(ResponseError, LookupError):
	"""Raised when a text body is given an encoding name that is not
	registered."""

	def __init__(self, encoding: str):
		super().__init__(f"Unsupported encoding: {encoding!r}")
		self.encoding: str = encoding


class BodyConsumedError(ResponseError, RuntimeError):
	"""Raised when reading a body that was already fully read or closed."""


# -----------------------------------------------------------------------------
#
# BODY
#
# -----------------------------------------------------------------------------


class HTTPBody(ABC):
	"""The readable source of a response body. Whatever the origin (bytes,
	file, stream), bodies are read the same way and support a single pass:
	once the end of the data has been reached, any further read raises
	`BodyConsumedError`."""

	__slots__ = ["consumed", "closed"]
	kind: ClassVar[str] = "body"

	def __init__(self) -> None:
		self.consumed: bool = False
		self.closed: bool = False

	@abstractmethod
	def _read(self, size: int) -> bytes: ...

	def _close(self) -> None:
		pass

	def read(self, size: int = -1) -> bytes:
		"""Reads up to `size` bytes, or everything left when `size` is
		negative. An empty result means the body is exhausted."""
		if self.closed:
			raise BodyConsumedError(f"Body is closed: {self}")
		elif self.consumed:
			raise BodyConsumedError(f"Body was already read: {self}")
		elif size == 0:
			return b""
		chunk = self._read(size)
		if size < 0 or not chunk:
			self.consumed = True
		return chunk

	def chunks(self, size: int = config.CHUNK_SIZE) -> Iterator[bytes]:
		"""Iterates on the body by chunks of at most `size` bytes."""
		return iterchunks(self, size)

	def load(self) -> bytes:
		"""Reads the whole body in memory."""
		return self.read(-1)

	def close(self) -> None:
		if not self.closed:
			self.closed = True
			self._close()

	def __str__(self) -> str:
		return f"HTTPBody({self.kind})"


class HTTPBodyBlob(HTTPBody):
	"""A body backed by bytes held in memory."""

	__slots__ = ["payload", "offset"]
	kind: ClassVar[str] = "blob"

	def __init__(self, payload: bytes):
		super().__init__()
		self.payload: bytes = payload
		self.offset: int = 0

	@property
	def length(self) -> int:
		return len(self.payload)

	def _read(self, size: int) -> bytes:
		start: int = self.offset
		end: int = len(self.payload) if size < 0 else start + size
		self.offset = min(end, len(self.payload))
		return self.payload[start:end]


class HTTPBodyFile(HTTPBody):
	"""A body read from a file that is opened when the body is created."""

	__slots__ = ["path", "handle", "size"]
	kind: ClassVar[str] = "file"

	@staticmethod
	def Open(path: TPath) -> "HTTPBodyFile":
		"""Opens the file at `path` for reading, capturing its size at open
		time. Raises `OSError` if the file can't be opened, in which case no
		handle is left open."""
		handle = open(path, "rb")
		try:
			size = os.fstat(handle.fileno()).st_size
		except OSError:
			handle.close()
			raise
		return HTTPBodyFile(Path(path), handle, size)

	def __init__(self, path: Path, handle: BinaryIO, size: int):
		super().__init__()
		self.path: Path = path
		self.handle: BinaryIO = handle
		self.size: int = size

	def _read(self, size: int) -> bytes:
		return self.handle.read(size)

	def _close(self) -> None:
		self.handle.close()

	def __str__(self) -> str:
		return f"HTTPBody({self.kind}:{self.path})"


class HTTPBodyStream(HTTPBody):
	"""A body read from an arbitrary readable byte stream."""

	__slots__ = ["stream"]
	kind: ClassVar[str] = "stream"

	def __init__(self, stream: Readable):
		super().__init__()
		self.stream: Readable = stream

	def _read(self, size: int) -> bytes:
		# NOTE: Raw streams may return None when no data is available, we
		# treat this as the end of the stream.
		return self.stream.read(size) or b""

	def _close(self) -> None:
		close = getattr(self.stream, "close", None)
		if close:
			close()


class HTTPBodyIterator(HTTPBody):
	"""A body produced by an iterable (typically a generator) of `bytes` or
	`str` chunks, the latter being encoded with the default encoding."""

	__slots__ = ["source", "iterator", "buffer"]
	kind: ClassVar[str] = "iterator"

	def __init__(self, chunks: Iterable[bytes | str]):
		super().__init__()
		self.source: Iterable[bytes | str] = chunks
		self.iterator: Iterator[bytes | str] = iter(chunks)
		self.buffer: bytearray = bytearray()

	def _read(self, size: int) -> bytes:
		while size < 0 or len(self.buffer) < size:
			chunk = next(self.iterator, None)
			if chunk is None:
				break
			self.buffer += asBytes(chunk)
		n: int = len(self.buffer) if size < 0 else min(size, len(self.buffer))
		res = bytes(self.buffer[:n])
		del self.buffer[:n]
		return res

	def _close(self) -> None:
		close = getattr(self.source, "close", None)
		if close:
			close()


# -----------------------------------------------------------------------------
#
# MESSAGE
#
# -----------------------------------------------------------------------------


@mypyc_attr(allow_interpreted_subclasses=True)
class Message:
	"""The base of HTTP messages: a protocol version, headers and an optional
	body with its length. The body and length are set at creation and can't
	be changed afterwards, headers can."""

	HTTP_VERSION: ClassVar[str] = config.HTTP_VERSION

	__slots__ = ["version", "headers", "_body", "_length"]

	def __init__(
		self,
		version: str,
		headers: dict[str, str] | None,
		body: HTTPBody | None = None,
		length: int | None = 0,
	):
		self.version: str = version
		self.headers: dict[str, str] = (
			{headername(k): str(v) for k, v in headers.items()} if headers else {}
		)
		self._body: HTTPBody | None = body
		# NOTE: Without a body there is nothing to read, so the length is 0
		# whatever was given.
		self._length: int | None = 0 if body is None else asLength(length)

	@property
	def body(self) -> HTTPBody | None:
		return self._body

	@property
	def length(self) -> int | None:
		"""The exact number of bytes the body yields, or `None` when not
		known in advance."""
		return self._length

	@property
	def hasBody(self) -> bool:
		return self._body is not None

	@property
	def hasKnownLength(self) -> bool:
		return self._length is not None

	def hasHeader(self, name: str) -> bool:
		return headername(name) in self.headers

	def getHeader(self, name: str) -> str | None:
		return self.headers.get(headername(name))

	def setHeader(self, name: str, value: str | int | None) -> "Message":
		if value is None:
			self.headers.pop(headername(name), None)
		else:
			self.headers[headername(name)] = str(value)
		return self

	def setHeaders(self, headers: dict[str, str | int | None]) -> "Message":
		for k, v in headers.items():
			self.setHeader(k, v)
		return self

	def close(self) -> None:
		"""Releases the body source, for messages that won't be written."""
		if self._body is not None:
			self._body.close()

	def __enter__(self) -> "Message":
		return self

	def __exit__(
		self,
		exc_type: type[BaseException] | None,
		exc: BaseException | None,
		tb: TracebackType | None,
	) -> None:
		self.close()


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


class Response(Message):
	"""An HTTP response: a status code, headers and an optional body.

	Responses are best created through the factories, which normalize the
	different kinds of content into a body and a length:

	- `Of`/`Ok` for no body,
	- `OfBytes`/`OkBytes` for bytes,
	- `OfText`/`OkText` for text in the default or a named encoding,
	- `OfEncoded`/`OkEncoded` for text with an already resolved codec,
	- `OfFile`/`OkFile` for a file,
	- `OfStream`/`OkStream` for a readable stream,
	- `OfIterator` for an iterable of chunks,
	- `OfBody` for an existing `HTTPBody`.

	Passing `None` as content always produces a response without a body,
	without trying to encode or open anything.
	"""

	__slots__ = ["_code"]

	def __init__(
		self,
		version: str,
		code: ResponseCode | int,
		headers: dict[str, str] | None,
		body: HTTPBody | None = None,
		length: int | None = 0,
	):
		responseCode: ResponseCode = ResponseCode.Ensure(code)
		super().__init__(version, headers, body, length)
		self._code: ResponseCode = responseCode

	# =========================================================================
	# OK FACTORIES
	# =========================================================================

	@staticmethod
	def Ok() -> "Response":
		return Response.Of(ResponseCode.OK)

	@staticmethod
	def OkBytes(content: bytes | bytearray | memoryview | None) -> "Response":
		return Response.OfBytes(ResponseCode.OK, content)

	@staticmethod
	def OkText(content: str | None, encoding: str | None = None) -> "Response":
		return Response.OfText(ResponseCode.OK, content, encoding)

	@staticmethod
	def OkEncoded(content: str | None, codec: CodecInfo) -> "Response":
		return Response.OfEncoded(ResponseCode.OK, content, codec)

	@staticmethod
	def OkFile(path: TPath | None) -> "Response":
		return Response.OfFile(ResponseCode.OK, path)

	@staticmethod
	def OkStream(stream: Readable | None, length: int | None) -> "Response":
		return Response.OfStream(ResponseCode.OK, stream, length)

	# =========================================================================
	# FACTORIES
	# =========================================================================

	@staticmethod
	def Of(code: ResponseCode | int, *, version: str | None = None) -> "Response":
		return Response(version or Message.HTTP_VERSION, code, {})

	@staticmethod
	def OfBytes(
		code: ResponseCode | int,
		content: bytes | bytearray | memoryview | None,
		*,
		version: str | None = None,
	) -> "Response":
		if content is None:
			return Response.Of(code, version=version)
		# NOTE: An empty payload is still a body, distinct from no body.
		payload: bytes = asBytes(content)
		return Response.OfBody(
			code, HTTPBodyBlob(payload), len(payload), version=version
		)

	@staticmethod
	def OfText(
		code: ResponseCode | int,
		content: str | None,
		encoding: str | None = None,
		*,
		version: str | None = None,
	) -> "Response":
		"""Encodes `content` with the named encoding, or the default one. An
		unknown encoding raises `UnsupportedEncodingError`, unless `content`
		is `None` in which case the encoding is not looked up."""
		if content is None:
			return Response.Of(code, version=version)
		elif encoding is None:
			return Response.OfBytes(code, encode(content), version=version)
		# NOTE: Some registered codecs (`idna`, `undefined`) refuse to encode
		# with replacement, they are as unusable as unknown ones.
		try:
			codec = lookupEncoding(encoding)
			payload: bytes = encode(content, codec)
		except (LookupError, UnicodeError) as e:
			raise UnsupportedEncodingError(encoding) from e
		return Response.OfBytes(code, payload, version=version)

	@staticmethod
	def OfEncoded(
		code: ResponseCode | int,
		content: str | None,
		codec: CodecInfo,
		*,
		version: str | None = None,
	) -> "Response":
		if content is None:
			return Response.Of(code, version=version)
		return Response.OfBytes(code, encode(content, codec), version=version)

	@staticmethod
	def OfFile(
		code: ResponseCode | int,
		path: TPath | None,
		*,
		version: str | None = None,
	) -> "Response":
		"""Opens the file at `path` as the body, the length being the size of
		the file when opened. Raises `OSError` if the file can't be opened.

		If the file changes before the body is written, the written bytes
		may not match the length."""
		if path is None:
			return Response.Of(code, version=version)
		body = HTTPBodyFile.Open(path)
		if config.LOG_BODIES:
			debug("Opened file body", Path=str(body.path), Length=body.size)
		return Response.OfBody(code, body, body.size, version=version)

	@staticmethod
	def OfStream(
		code: ResponseCode | int,
		stream: Readable | None,
		length: int | None,
		*,
		version: str | None = None,
	) -> "Response":
		"""Binds the stream as the body. The length is trusted as given, and
		may be `UNKNOWN_LENGTH`."""
		if stream is None:
			return Response.Of(code, version=version)
		return Response.OfBody(code, HTTPBodyStream(stream), length, version=version)

	@staticmethod
	def OfIterator(
		code: ResponseCode | int,
		chunks: Iterable[bytes | str] | None,
		length: int | None = UNKNOWN_LENGTH,
		*,
		version: str | None = None,
	) -> "Response":
		if chunks is None:
			return Response.Of(code, version=version)
		return Response.OfBody(
			code, HTTPBodyIterator(chunks), length, version=version
		)

	@staticmethod
	def OfBody(
		code: ResponseCode | int,
		body: HTTPBody | None,
		length: int | None,
		*,
		version: str | None = None,
	) -> "Response":
		return Response(version or Message.HTTP_VERSION, code, {}, body, length)

	# =========================================================================
	# ACCESSORS
	# =========================================================================

	@property
	def code(self) -> ResponseCode:
		return self._code

	@property
	def status(self) -> int:
		return self._code.status

	@property
	def message(self) -> str:
		return self._code.message

	def head(self, headers: dict[str, str] | None = None) -> bytes:
		"""Serializes the status line and headers (or the given `headers`
		instead), terminated by an empty line. Header values are encoded as
		Latin-1, other characters being replaced."""
		lines: list[str] = [f"{self.version} {self.status} {self.message}"]
		lines += [
			f"{k}: {v}"
			for k, v in (self.headers if headers is None else headers).items()
		]
		lines.append("")
		lines.append("")
		return "\r\n".join(lines).encode("latin-1", "replace")

	def __str__(self) -> str:
		return f"Response({self.version} {self.code} {self.headers} {self.body} {self.length})"


# EOF
