import codecs
from codecs import CodecInfo
from typing import Iterator, Protocol

from ..config import DEFAULT_ENCODING as DEFAULT_ENCODING_NAME

DEFAULT_CODEC: CodecInfo = codecs.lookup(DEFAULT_ENCODING_NAME)
DEFAULT_ENCODING: str = DEFAULT_CODEC.name


class Readable(Protocol):
	"""Anything that can be read like a binary file."""

	def read(self, size: int = -1, /) -> bytes: ...


def lookupEncoding(name: str) -> CodecInfo:
	"""Resolves the codec registered for `name`, raising `LookupError` when
	there is none, or when the codec is not a text encoding (like `rot13`)."""
	codec = codecs.lookup(name)
	# NOTE: Binary transforms (`base64`, `zlib`) and text transforms
	# (`rot13`) are registered too, but `str.encode` refuses them.
	if not getattr(codec, "_is_text_encoding", True):
		raise LookupError(f"'{name}' is not a text encoding")
	return codec


def encode(text: str, codec: CodecInfo = DEFAULT_CODEC) -> bytes:
	"""Encodes `text` with the given codec. Characters that the codec can't
	represent are replaced rather than raising."""
	payload, _ = codec.encode(text, "replace")
	return bytes(payload)


def asBytes(value: str | bytes | bytearray | memoryview | None) -> bytes:
	if isinstance(value, bytes):
		return value
	elif isinstance(value, (bytearray, memoryview)):
		return bytes(value)
	elif isinstance(value, str):
		return encode(value)
	elif value is None:
		return b""
	else:
		raise ValueError(f"Expected bytes or str, got: {value!r}")


def iterchunks(reader: Readable, size: int) -> Iterator[bytes]:
	"""Yields chunks of at most `size` bytes until `reader` is exhausted."""
	while chunk := reader.read(size):
		yield chunk


# EOF
