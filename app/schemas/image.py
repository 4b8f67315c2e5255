"""Pydantic schema for the image rendering contract."""

from pydantic import BaseModel


def _wire_bool(value: bool) -> str:
    return "true" if value else "false"


class ImageParams(BaseModel):
    """Everything a renderer needs to reproduce one frame image.

    On the wire every field is a string: booleans are ``"true"``/``"false"``
    and missing values are empty strings.
    """

    fid: str = ""
    join_date: str = ""
    anniversary: str = ""
    is_error: bool = False
    error_message: str = ""
    is_initial: bool = False
    awesome_text: str = ""
    username: str = ""

    def to_query(self) -> dict[str, str]:
        """Query parameters in the order the /api/og route reads them."""
        return {
            "fid": self.fid,
            "joinDate": self.join_date,
            "anniversary": self.anniversary,
            "isError": _wire_bool(self.is_error),
            "errorMessage": self.error_message,
            "isInitial": _wire_bool(self.is_initial),
            "awesomeText": self.awesome_text,
            "username": self.username,
        }
