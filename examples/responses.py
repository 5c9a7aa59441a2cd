import sys
from pathlib import Path

from reply import Response, ResponseCode, Responses, StreamResponseWriter

# Writes a few responses to stdout, showing the framing chosen for each
# kind of body.

out = sys.stdout.buffer
responses = Responses()

for res in (
	Response.Ok(),
	Response.OkText("Hello, World!"),
	Response.OfBytes(ResponseCode.NOT_FOUND, b""),
	Response.OfIterator(ResponseCode.OK, (f"line {i}\n" for i in range(3))),
	responses.respondFile(Path(__file__)),
	responses.returns({"status": "ok"}),
):
	StreamResponseWriter(out).write(res)
	out.write(b"\n---\n")

# EOF
