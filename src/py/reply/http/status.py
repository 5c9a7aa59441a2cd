from enum import Enum, IntEnum

# -----------------------------------------------------------------------------
#
# CATEGORIES
#
# -----------------------------------------------------------------------------


class ResponseCategory(Enum):
	"""The class of a status code, as given by its first digit."""

	Informational = 1
	Success = 2
	Redirection = 3
	ClientError = 4
	ServerError = 5


# -----------------------------------------------------------------------------
#
# CODES
#
# -----------------------------------------------------------------------------


# SEE: https://www.iana.org/assignments/http-status-codes/http-status-codes.xhtml
class ResponseCode(IntEnum):
	"""The closed set of status codes a response can carry. Members compare
	equal to their numeric status."""

	CONTINUE = 100
	SWITCHING_PROTOCOLS = 101
	PROCESSING = 102
	EARLY_HINTS = 103
	OK = 200
	CREATED = 201
	ACCEPTED = 202
	NON_AUTHORITATIVE_INFORMATION = 203
	NO_CONTENT = 204
	RESET_CONTENT = 205
	PARTIAL_CONTENT = 206
	MULTI_STATUS = 207
	ALREADY_REPORTED = 208
	IM_USED = 226
	MULTIPLE_CHOICES = 300
	MOVED_PERMANENTLY = 301
	FOUND = 302
	SEE_OTHER = 303
	NOT_MODIFIED = 304
	USE_PROXY = 305
	TEMPORARY_REDIRECT = 307
	PERMANENT_REDIRECT = 308
	BAD_REQUEST = 400
	UNAUTHORIZED = 401
	PAYMENT_REQUIRED = 402
	FORBIDDEN = 403
	NOT_FOUND = 404
	METHOD_NOT_ALLOWED = 405
	NOT_ACCEPTABLE = 406
	PROXY_AUTHENTICATION_REQUIRED = 407
	REQUEST_TIMEOUT = 408
	CONFLICT = 409
	GONE = 410
	LENGTH_REQUIRED = 411
	PRECONDITION_FAILED = 412
	CONTENT_TOO_LARGE = 413
	URI_TOO_LONG = 414
	UNSUPPORTED_MEDIA_TYPE = 415
	RANGE_NOT_SATISFIABLE = 416
	EXPECTATION_FAILED = 417
	IM_A_TEAPOT = 418
	MISDIRECTED_REQUEST = 421
	UNPROCESSABLE_CONTENT = 422
	LOCKED = 423
	FAILED_DEPENDENCY = 424
	TOO_EARLY = 425
	UPGRADE_REQUIRED = 426
	PRECONDITION_REQUIRED = 428
	TOO_MANY_REQUESTS = 429
	REQUEST_HEADER_FIELDS_TOO_LARGE = 431
	UNAVAILABLE_FOR_LEGAL_REASONS = 451
	INTERNAL_SERVER_ERROR = 500
	NOT_IMPLEMENTED = 501
	BAD_GATEWAY = 502
	SERVICE_UNAVAILABLE = 503
	GATEWAY_TIMEOUT = 504
	HTTP_VERSION_NOT_SUPPORTED = 505
	VARIANT_ALSO_NEGOTIATES = 506
	INSUFFICIENT_STORAGE = 507
	LOOP_DETECTED = 508
	NOT_EXTENDED = 510
	NETWORK_AUTHENTICATION_REQUIRED = 511

	@property
	def status(self) -> int:
		return int(self.value)

	@property
	def category(self) -> ResponseCategory:
		return ResponseCategory(self.value // 100)

	@property
	def message(self) -> str:
		return HTTP_STATUS[self.value]

	@property
	def allowsBody(self) -> bool:
		"""Informational, `204 No Content` and `304 Not Modified` responses
		never carry a body."""
		return not (
			self.category is ResponseCategory.Informational
			or self is ResponseCode.NO_CONTENT
			or self is ResponseCode.NOT_MODIFIED
		)

	@staticmethod
	def Ensure(code: "ResponseCode | int") -> "ResponseCode":
		"""Returns the member for `code`, raising `ValueError` if the number
		is not a known status."""
		return code if isinstance(code, ResponseCode) else ResponseCode(code)

	def __str__(self) -> str:
		return f"{self.value} {self.message}"


# NOTE: The reason phrases differ from the member names in a few places
# (`I'm a teapot`, `Non-Authoritative Information`), hence the overrides.
HTTP_STATUS: dict[int, str] = {
	_.value: " ".join(w.capitalize() for w in _.name.split("_"))
	for _ in ResponseCode
} | {
	203: "Non-Authoritative Information",
	207: "Multi-Status",
	226: "IM Used",
	414: "URI Too Long",
	418: "I'm a teapot",
	505: "HTTP Version Not Supported",
	200: "OK",
}

# EOF
