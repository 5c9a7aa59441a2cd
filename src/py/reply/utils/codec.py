from abc import ABC, abstractmethod


class BytesTransform(ABC):
	"""An abstract bytes transform."""

	@abstractmethod
	def feed(self, chunk: bytes) -> bytes:
		"""Feeds bytes to the transform, returning what can be emitted now."""

	@abstractmethod
	def flush(self) -> bytes:
		"""Returns whatever is needed to terminate the transformed output."""


class IdemCodec(BytesTransform):
	"""A codec that doesn't change anything, can be used when you need to swap in another codec."""

	def feed(self, chunk: bytes) -> bytes:
		return chunk

	def flush(self) -> bytes:
		return b""


# SEE: https://httpwg.org/specs/rfc9112.html#chunked.encoding
class ChunkedEncoder(BytesTransform):
	"""Frames each fed chunk as an HTTP/1.1 chunk, the flush producing
	the last (empty) chunk."""

	__slots__ = ["count"]

	def __init__(self) -> None:
		super().__init__()
		self.count: int = 0

	def feed(self, chunk: bytes) -> bytes:
		# An empty chunk would be read as the end of the body
		if not chunk:
			return b""
		self.count += 1
		return b"%X\r\n%s\r\n" % (len(chunk), chunk)

	def flush(self) -> bytes:
		return b"0\r\n\r\n"


# EOF
