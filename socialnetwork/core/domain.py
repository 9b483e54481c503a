"""
Core domain models for social network OAuth redirects.

These models represent the business domain and are independent of
any infrastructure or delivery mechanism.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from socialnetwork.core.exceptions import UnknownProviderError


# Flat mapping of parameter name to value, shared by redirects and exchanges
ParameterMap = Dict[str, str]


class Provider(str, Enum):
    """Supported identity providers, valued by their wire tag."""

    FACEBOOK = "facebook"
    GOOGLE = "google"
    ODNOKLASSNIKI = "odnoklassniki"
    VKONTAKTE = "vkontakte"

    @classmethod
    def from_tag(cls, tag: str) -> "Provider":
        """
        Look up a provider by its wire tag.

        Raises:
            UnknownProviderError: If the tag matches no provider
        """
        try:
            return cls(tag)
        except ValueError:
            raise UnknownProviderError(f"Unknown provider: {tag!r}") from None


@dataclass(frozen=True)
class Credentials:
    """Snapshot of a provider's client credentials for a single request."""

    client_id: str
    client_secret: Optional[str] = None

    @property
    def has_secret(self) -> bool:
        return bool(self.client_secret)


class StatePayload(BaseModel):
    """
    JSON document carried in the `state` parameter of web redirects.

    Threads the provider identity through the generic landing page.
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    provider: str = Field(description="Provider wire tag")

    @classmethod
    def for_provider(cls, provider: Provider) -> "StatePayload":
        return cls(provider=provider.value)

    def encode(self) -> str:
        """Serialize to the compact form sent to the provider."""
        return self.model_dump_json()


class RedirectKind(str, Enum):
    NATIVE = "native"
    WEB = "web"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Classification:
    """
    Outcome of classifying an inbound URL.

    `provider` is only known up front for native redirects; web redirects
    identify their provider through `state`.
    """

    kind: RedirectKind
    provider: Optional[Provider] = None

    @classmethod
    def native(cls, provider: Provider) -> "Classification":
        return cls(kind=RedirectKind.NATIVE, provider=provider)

    @classmethod
    def web(cls) -> "Classification":
        return cls(kind=RedirectKind.WEB)

    @classmethod
    def unrecognized(cls) -> "Classification":
        return cls(kind=RedirectKind.UNRECOGNIZED)

    @property
    def is_recognized(self) -> bool:
        return self.kind is not RedirectKind.UNRECOGNIZED


@dataclass(frozen=True)
class ExchangeRequest:
    """Everything needed to trade an authorization code for a token."""

    provider: Provider
    code: str
    credentials: Credentials
    redirect_uri: str


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    INVALID_RESPONSE = "invalid_response"


@dataclass(frozen=True)
class CompletionSuccess:
    parameters: ParameterMap

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class CompletionFailure:
    kind: FailureKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


CompletionResult = Union[CompletionSuccess, CompletionFailure]
