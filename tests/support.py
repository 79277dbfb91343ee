"""Test support utilities for the affiliation steps."""

from __future__ import annotations

from affiliation_module import RequestState

SP = "https://sp1.example.org"
IDP = "https://idp.example.org/idp"
REMOTE_IDP = "https://remote.example.edu/idp"


class FailingDirectory:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def get_metadata(self, entity_id: str, category: str) -> dict | None:
        self.calls.append((entity_id, category))
        raise RuntimeError("metadata store unavailable")


class RecordingReporter:
    def __init__(self) -> None:
        self.errors: list[BaseException] = []
        self.states: list[RequestState] = []

    def __call__(self, error: BaseException, state: RequestState) -> None:
        self.errors.append(error)
        self.states.append(state)


class FailingReporter:
    def __call__(self, error: BaseException, state: RequestState) -> None:
        raise TypeError("cannot render error page")


def make_state(attributes: dict[str, list[str]] | None = None, **kwargs) -> RequestState:
    kwargs.setdefault("requesting_party", SP)
    kwargs.setdefault("responding_party", IDP)
    kwargs.setdefault("responding_party_metadata", {
        "entityid": IDP,
        "UIInfo": {"DisplayName": {"en": "Example University"}},
    })
    return RequestState(attributes=dict(attributes or {}), **kwargs)
