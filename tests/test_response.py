import codecs
import io
import os
from pathlib import Path

import pytest

from reply import (
	UNKNOWN_LENGTH,
	BodyConsumedError,
	HTTPBodyBlob,
	HTTPBodyFile,
	HTTPBodyStream,
	Message,
	Response,
	ResponseCode,
	UnsupportedEncodingError,
)
from reply.http import model

# -----------------------------------------------------------------------------
#
# NO BODY
#
# -----------------------------------------------------------------------------


def test_ok_is_empty():
	res = Response.Ok()
	assert res.code is ResponseCode.OK
	assert res.version == Message.HTTP_VERSION == "HTTP/1.1"
	assert res.headers == {}
	assert res.body is None
	assert res.length == 0
	assert not res.hasBody


def test_constructor_without_body():
	res = Response("HTTP/1.0", ResponseCode.NOT_FOUND, {"x-request-id": "42"})
	assert res.version == "HTTP/1.0"
	assert res.code is ResponseCode.NOT_FOUND
	assert res.headers == {"X-Request-Id": "42"}
	assert res.body is None
	assert res.length == 0


def test_constructor_binds_body_as_is():
	body = HTTPBodyBlob(b"abc")
	res = Response("HTTP/1.1", 201, None, body, 3)
	assert res.code is ResponseCode.CREATED
	assert res.body is body
	assert res.length == 3


def test_constructor_coerces_int_codes():
	assert Response.Of(404).code is ResponseCode.NOT_FOUND
	with pytest.raises(ValueError):
		Response.Of(299)


@pytest.mark.parametrize(
	"factory",
	[
		lambda: Response.OfBytes(ResponseCode.OK, None),
		lambda: Response.OkBytes(None),
		lambda: Response.OkText(None),
		lambda: Response.OkText(None, "utf-8"),
		lambda: Response.OkText(None, "not-a-real-charset"),
		lambda: Response.OkEncoded(None, codecs.lookup("utf-8")),
		lambda: Response.OkFile(None),
		lambda: Response.OkStream(None, 10),
		lambda: Response.OfIterator(ResponseCode.OK, None),
		lambda: Response.OfBody(ResponseCode.OK, None, 10),
	],
)
def test_none_content_gives_no_body(factory):
	res = factory()
	assert res.body is None
	assert res.length == 0
	assert res.code is ResponseCode.OK


# -----------------------------------------------------------------------------
#
# BYTES & TEXT
#
# -----------------------------------------------------------------------------


@pytest.mark.parametrize("payload", [b"Hello, World!", b"\x00\xff" * 1000, b""])
def test_bytes_body(payload):
	res = Response.OfBytes(ResponseCode.ACCEPTED, payload)
	assert res.code is ResponseCode.ACCEPTED
	assert isinstance(res.body, HTTPBodyBlob)
	assert res.length == len(payload)
	assert res.body.load() == payload


def test_empty_bytes_is_a_body():
	res = Response.OkBytes(b"")
	assert res.hasBody
	assert res.body is not None
	assert res.length == 0
	assert res.body.read() == b""


def test_bytearray_is_copied():
	data = bytearray(b"abc")
	res = Response.OkBytes(data)
	data[0] = ord("z")
	assert res.body is not None and res.body.load() == b"abc"


def test_text_uses_default_encoding():
	res = Response.OkText("héllo")
	assert res.body is not None
	assert res.length == len("héllo".encode("utf8"))
	assert res.body.load() == "héllo".encode("utf8")


def test_text_never_fails_on_default_encoding():
	res = Response.OkText("a\ud800b")
	assert res.body is not None and res.body.load() == b"a?b"


def test_named_and_resolved_encodings_match():
	text = "Grüße, 世界"
	named = Response.OkText(text, "UTF-8")
	resolved = Response.OkEncoded(text, codecs.lookup("utf-8"))
	assert named.length == resolved.length
	assert named.body is not None and resolved.body is not None
	assert named.body.load() == resolved.body.load() == text.encode("utf-8")


def test_named_encoding():
	res = Response.OfText(ResponseCode.OK, "é", "latin-1")
	assert res.length == 1
	assert res.body is not None and res.body.load() == b"\xe9"


def test_named_encoding_replaces_unencodable():
	res = Response.OkText("日本", "ascii")
	assert res.body is not None and res.body.load() == b"??"


@pytest.mark.parametrize(
	"name", ["not-a-real-charset", "rot13", "base64", "idna", "undefined"]
)
def test_unsupported_encoding(name):
	with pytest.raises(UnsupportedEncodingError) as error:
		Response.OkText("text", name)
	assert error.value.encoding == name
	assert isinstance(error.value, LookupError)


def test_unsupported_encoding_empty_text():
	with pytest.raises(UnsupportedEncodingError):
		Response.OkText("", "not-a-real-charset")


# -----------------------------------------------------------------------------
#
# FILES
#
# -----------------------------------------------------------------------------


def test_file_body(tmp_path: Path):
	path = tmp_path / "index.html"
	path.write_bytes(b"<h1>Hello</h1>")
	with Response.OkFile(path) as res:
		assert isinstance(res.body, HTTPBodyFile)
		assert res.length == 14
		assert res.body.load() == b"<h1>Hello</h1>"
	assert res.body.closed


def test_file_body_accepts_str_paths(tmp_path: Path):
	path = tmp_path / "data.bin"
	path.write_bytes(b"")
	res = Response.OfFile(ResponseCode.OK, str(path))
	assert res.hasBody
	assert res.length == 0
	res.close()


def test_file_length_is_taken_at_open_time(tmp_path: Path):
	path = tmp_path / "growing.log"
	path.write_bytes(b"12345")
	res = Response.OkFile(path)
	with open(path, "ab") as f:
		f.write(b"678")
	assert res.length == 5
	res.close()


def test_missing_file():
	with pytest.raises(FileNotFoundError):
		Response.OkFile(Path("/this/file/does/not/exist"))


def test_file_closed_when_size_fails(tmp_path: Path, monkeypatch):
	path = tmp_path / "data.bin"
	path.write_bytes(b"data")
	opened = []

	def recordingOpen(*args, **kwargs):
		handle = open(*args, **kwargs)
		opened.append(handle)
		return handle

	def failingStat(fd):
		raise OSError("stat failed")

	monkeypatch.setattr(model, "open", recordingOpen, raising=False)
	monkeypatch.setattr(model.os, "fstat", failingStat)
	with pytest.raises(OSError, match="stat failed"):
		Response.OkFile(path)
	assert len(opened) == 1
	assert opened[0].closed


def test_directory_is_not_a_file(tmp_path: Path):
	with pytest.raises(OSError):
		Response.OkFile(tmp_path)


@pytest.mark.skipif(
	not hasattr(os, "geteuid") or os.geteuid() == 0,
	reason="Permissions are not enforced for root",
)
def test_unreadable_file(tmp_path: Path):
	path = tmp_path / "secret"
	path.write_bytes(b"secret")
	path.chmod(0)
	with pytest.raises(PermissionError):
		Response.OkFile(path)


# -----------------------------------------------------------------------------
#
# STREAMS
#
# -----------------------------------------------------------------------------


def test_stream_with_length():
	stream = io.BytesIO(b"streamed")
	res = Response.OkStream(stream, 8)
	assert isinstance(res.body, HTTPBodyStream)
	assert res.length == 8
	assert res.hasKnownLength
	assert res.body.load() == b"streamed"


def test_stream_with_unknown_length():
	res = Response.OfStream(ResponseCode.OK, io.BytesIO(b"data"), UNKNOWN_LENGTH)
	assert res.length is None
	assert not res.hasKnownLength
	assert res.body is not None and res.body.load() == b"data"


def test_stream_length_is_not_checked():
	res = Response.OkStream(io.BytesIO(b"data"), 100)
	assert res.length == 100


def test_iterator_body():
	res = Response.OfIterator(ResponseCode.OK, (_ for _ in [b"a", "é", b"c"]))
	assert res.length is None
	assert res.body is not None and res.body.load() == "aéc".encode("utf8")


# -----------------------------------------------------------------------------
#
# LIFECYCLE
#
# -----------------------------------------------------------------------------


def test_body_is_read_once():
	res = Response.OkBytes(b"once")
	assert res.body is not None
	assert res.body.load() == b"once"
	with pytest.raises(BodyConsumedError):
		res.body.read()


def test_code_body_and_length_are_read_only():
	res = Response.OkBytes(b"abc")
	with pytest.raises(AttributeError):
		res.code = ResponseCode.NOT_FOUND  # type: ignore[misc]
	with pytest.raises(AttributeError):
		res.body = None  # type: ignore[misc]
	with pytest.raises(AttributeError):
		res.length = 10  # type: ignore[misc]


def test_headers_are_mutable():
	res = Response.Ok()
	res.setHeader("content-type", "text/plain").setHeaders(
		{"x-one": 1, "X-Two": "2"}
	)
	assert res.headers == {"Content-Type": "text/plain", "X-One": "1", "X-Two": "2"}
	assert list(res.headers) == ["Content-Type", "X-One", "X-Two"]
	assert res.getHeader("CONTENT-TYPE") == "text/plain"
	assert res.hasHeader("x-one")
	res.setHeader("X-One", None)
	assert not res.hasHeader("X-One")


def test_factories_do_not_share_headers():
	a, b = Response.Ok(), Response.Ok()
	a.setHeader("X-Test", "a")
	assert b.headers == {}


def test_head():
	res = Response.Of(ResponseCode.NOT_FOUND)
	res.setHeader("Content-Type", "text/plain")
	assert res.head() == b"HTTP/1.1 404 Not Found\r\nContent-Type: text/plain\r\n\r\n"
	assert res.status == 404
	assert res.message == "Not Found"


def test_head_encodes_headers_as_latin1():
	res = Response.Ok()
	res.setHeader("Content-Disposition", "attachment; filename=café.txt")
	res.setHeader("X-Title", "日本")
	assert res.head() == (
		b"HTTP/1.1 200 OK\r\n"
		b"Content-Disposition: attachment; filename=caf\xe9.txt\r\n"
		b"X-Title: ??\r\n"
		b"\r\n"
	)


# EOF
