"""Raw Bedrock invocation result."""

import json
from typing import Any, Dict, Optional


class RawBedrockResult:
    """Holds the ``invoke_model`` response exactly as the SDK returned it."""

    def __init__(self, response: Dict[str, Any]):
        self._response = response
        self._data: Optional[Dict[str, Any]] = None

    def get_object(self) -> Dict[str, Any]:
        """Return the underlying SDK response."""
        return self._response

    def get_data(self) -> Dict[str, Any]:
        """
        Decode the JSON response body.

        The body is a one-shot stream, so the decoded dict is cached and
        returned on every later call.
        """
        if self._data is None:
            body = self._response["body"]
            raw = body.read() if hasattr(body, "read") else body
            if isinstance(raw, bytes):
                raw = raw.decode()
            self._data = json.loads(raw)
        return self._data
