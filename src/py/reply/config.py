from os import getenv

# The protocol version stamped on responses built by the factories
HTTP_VERSION: str = getenv("REPLY_HTTP_VERSION", "HTTP/1.1")

# Encoding used for text bodies when none is given. This is resolved when
# `reply.utils.io` is imported, so an invalid value fails early.
DEFAULT_ENCODING: str = getenv("REPLY_ENCODING", "utf8")

# Size of the reads done by the writers when draining a body
CHUNK_SIZE: int = int(getenv("REPLY_CHUNK_SIZE", 64_000))

# Enables debug log entries
DEBUG: bool = getenv("REPLY_DEBUG", "0") == "1"

LOG_BODIES: bool = getenv("REPLY_LOG_BODIES", "0") == "1"

# EOF
