import json
import logging

logger = logging.getLogger(__name__)

REDACTED_FIELDS = frozenset({"password", "token"})


def redact(body: str) -> str:
    """Mask credential fields in a JSON body; non-JSON bodies pass through."""
    try:
        data = json.loads(body)
    except ValueError:
        return body
    if isinstance(data, dict):
        data = {
            key: "***" if key in REDACTED_FIELDS else value
            for key, value in data.items()
        }
    return json.dumps(data)


class RequestResponseLoggingMiddleware:
    """
    Logs each API request method, path and body together with the
    response status and content. Passwords and issued tokens are masked.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_body = ""
        try:
            if request.method in ["POST", "PUT", "PATCH"] and request.body:
                request_body = redact(request.body.decode("utf-8"))
        except UnicodeDecodeError:
            request_body = "<Could not decode body>"

        logger.info(
            "API Request: %s %s Body: %s",
            request.method,
            request.get_full_path(),
            request_body,
        )

        response = self.get_response(request)

        response_content = ""
        response_type = response.get("Content-Type", "")
        if response_type.startswith("application/json") and hasattr(
            response, "content"
        ):
            try:
                response_content = redact(response.content.decode("utf-8"))
            except UnicodeDecodeError:
                response_content = "<Could not decode content>"
        else:
            response_content = f"<Content-Type: {response_type}>"

        logger.info(
            "API Response: %s %s Status: %s Content: %s",
            request.method,
            request.get_full_path(),
            response.status_code,
            response_content,
        )

        return response
