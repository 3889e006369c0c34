"""Models for the inputs and outputs of privacy signal resolution."""

from enum import Enum
from typing import Any, Iterable, Iterator, List, Mapping, Optional

from pydantic import BaseModel, Field

from .parsing import string_to_boolean

GPC_HEADER = "Sec-GPC"
DNT_HEADER = "DNT"
COOKIE_HEADER = "Cookie"


class SignalSource(str, Enum):
    """Where a resolved signal came from."""
    GPC_NAVIGATOR = "gpc_navigator"
    GPC_COOKIE = "gpc_cookie"
    DNT_NAVIGATOR = "dnt_navigator"
    DNT_COOKIE = "dnt_cookie"
    DEFAULT = "default"


class SignalResolution(BaseModel):
    """Resolved opt-out preference and its provenance."""

    signal: bool = Field(description="True when the user opted out of tracking")
    source: SignalSource = Field(description="Input that decided the signal")


class UserAgentEnvironment(BaseModel):
    """Signals a user agent exposes to the resolver.

    ``None`` means the user agent does not provide that signal at all,
    which is different from a signal that is present and off.
    """

    global_privacy_control: Optional[bool] = Field(
        default=None,
        description="navigator.globalPrivacyControl"
    )
    do_not_track: Optional[str] = Field(default=None, description="navigator.doNotTrack")
    cookie: str = Field(default="", description="document.cookie style cookie string")

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "UserAgentEnvironment":
        """Build from HTTP request headers (names are case-insensitive)."""
        lowered = {name.lower(): value for name, value in headers.items()}

        gpc_header = lowered.get(GPC_HEADER.lower())
        return cls(
            global_privacy_control=None if gpc_header is None else string_to_boolean(gpc_header),
            do_not_track=lowered.get(DNT_HEADER.lower()),
            cookie=lowered.get(COOKIE_HEADER.lower()) or "",
        )

    @classmethod
    def from_navigator(cls, data: Optional[Mapping[str, Any]]) -> "UserAgentEnvironment":
        """Build from the values a page script read off ``navigator``/``document``.

        ``None`` marks an undefined navigator value. A value the page defined
        as null must arrive as ``False`` / ``"null"`` to count as present.
        """
        data = data or {}
        gpc = data.get("globalPrivacyControl")
        dnt = data.get("doNotTrack")
        return cls(
            global_privacy_control=None if gpc is None else bool(gpc),
            do_not_track=None if dnt is None else str(dnt),
            cookie=data.get("cookie") or "",
        )


class BodyClassList:
    """Ordered set of class tokens on the document's shared root node."""

    def __init__(self, tokens: Optional[Iterable[str]] = None):
        self._tokens: List[str] = []
        for token in tokens or []:
            self.add(token)

    @classmethod
    def from_class_name(cls, class_name: Optional[str]) -> "BodyClassList":
        """Parse a ``class`` attribute value."""
        return cls((class_name or "").split())

    @property
    def class_name(self) -> str:
        return " ".join(self._tokens)

    def contains(self, token: str) -> bool:
        return token in self._tokens

    def add(self, token: str) -> None:
        if token not in self._tokens:
            self._tokens.append(token)

    def remove(self, token: str) -> None:
        if token in self._tokens:
            self._tokens.remove(token)

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"BodyClassList({self._tokens!r})"
