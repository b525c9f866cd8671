"""chatbridge - a chat completion front door for the responses API.

Accepts chat-style requests on ``POST /api/chat``, rewrites them into the
responses API format and converts the streamed answer back into chat
completion chunks.

Example:
    >>> from chatbridge.main import create_app
    >>> import uvicorn
    >>> uvicorn.run(create_app(), host="127.0.0.1", port=3000)
"""

__version__ = "0.1.0"
