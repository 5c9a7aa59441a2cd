import mimetypes
from os import PathLike
from pathlib import Path

mimetypes.init()

MIME_TYPES: dict[str, str] = dict(
	bz2="application/x-bzip",
	gz="application/x-gzip",
	js="text/javascript",
	mjs="text/javascript",
	md="text/markdown",
	wasm="application/wasm",
)

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"


def contentType(path: Path | str | PathLike[str]) -> str:
	"""Guesses the content type from the given path"""
	name = str(path)
	return (
		res
		if (res := MIME_TYPES.get(name.rsplit(".", 1)[-1].lower()))
		else mimetypes.guess_type(name)[0] or DEFAULT_CONTENT_TYPE
	)


# EOF
