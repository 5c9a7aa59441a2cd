from .http.model import (
	UNKNOWN_LENGTH,
	BodyConsumedError,
	HTTPBody,
	HTTPBodyBlob,
	HTTPBodyFile,
	HTTPBodyIterator,
	HTTPBodyStream,
	Message,
	Response,
	ResponseError,
	UnsupportedEncodingError,
)  # NOQA: F401
from .http.status import HTTP_STATUS, ResponseCategory, ResponseCode  # NOQA: F401
from .http.api import ResponseFactory, Responses  # NOQA: F401
from .http.writer import (
	BytesResponseWriter,
	ResponseWriter,
	StreamResponseWriter,
)  # NOQA: F401

__version__ = "1.0.0"

# EOF
