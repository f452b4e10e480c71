"""Shared response shapes."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


def first_error_message(errors: list[dict]) -> str:
    """Render the first pydantic error as "<field>: <message>"."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    msg = str(error.get("msg", "Invalid value"))
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    if loc:
        return f"{'.'.join(loc)}: {msg}"
    return msg
