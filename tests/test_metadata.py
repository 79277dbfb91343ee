from __future__ import annotations

import pytest

from affiliation_module.metadata import (
    IDP_REMOTE,
    InMemoryMetadataDirectory,
    get_organization_name,
    resolve_from_metadata,
    resolve_responding_party,
)
from affiliation_module.util import AffiliationError
from tests.support import IDP, REMOTE_IDP, FailingDirectory, make_state


@pytest.mark.parametrize(
    ("metadata", "expected"),
    [
        ({"UIInfo": {"DisplayName": {"en": "Example University"}}}, "Example University"),
        (
            {"UIInfo": {"DisplayName": {"en": "Display"}}, "name": {"en": "Name"}},
            "Display",
        ),
        ({"UIInfo": {"DisplayName": {"el": "Πανεπιστήμιο"}}, "name": "Plain"}, "Plain"),
        ({"UIInfo": {"DisplayName": {"en": ""}}, "name": {"en": "Name"}}, "Name"),
        ({"UIInfo": {}, "name": {"en": "Name"}}, "Name"),
        ({"name": "Example University"}, "Example University"),
        ({"name": {"el": "Πανεπιστήμιο"}}, None),
        ({"name": ""}, None),
        ({"name": None}, None),
        ({"entityid": IDP}, None),
        ({}, None),
        (None, None),
    ],
)
def test_get_organization_name(metadata: dict | None, expected: str | None) -> None:
    assert get_organization_name(metadata) == expected


def test_in_memory_directory_lookup(directory: InMemoryMetadataDirectory) -> None:
    assert directory.get_metadata(REMOTE_IDP, IDP_REMOTE)["entityid"] == REMOTE_IDP
    assert directory.get_metadata(REMOTE_IDP, "saml20-sp-remote") is None
    assert directory.get_metadata("https://unknown.example.org", IDP_REMOTE) is None


def test_in_memory_directory_from_entries() -> None:
    entries = {IDP_REMOTE: {IDP: {"name": "Example University"}}}
    directory = InMemoryMetadataDirectory(entries)
    directory.add(REMOTE_IDP, {"name": "Remote College"})
    assert directory.get_metadata(IDP, IDP_REMOTE) == {"name": "Example University"}
    assert REMOTE_IDP not in entries[IDP_REMOTE]


def test_resolve_responding_party_uses_state() -> None:
    state = make_state()
    entity_id, metadata = resolve_responding_party(state, None)
    assert entity_id == IDP
    assert metadata is state.responding_party_metadata


def test_resolve_responding_party_on_bridge(directory: InMemoryMetadataDirectory) -> None:
    state = make_state(bridged_party=REMOTE_IDP)
    entity_id, metadata = resolve_responding_party(state, directory)
    assert entity_id == REMOTE_IDP
    assert get_organization_name(metadata) == "Remote College"


def test_resolve_responding_party_unknown_bridged_idp(directory: InMemoryMetadataDirectory) -> None:
    state = make_state(bridged_party="https://unknown.example.org")
    assert resolve_responding_party(state, directory) == ("https://unknown.example.org", None)


def test_resolve_responding_party_bridge_without_directory() -> None:
    with pytest.raises(AffiliationError):
        resolve_responding_party(make_state(bridged_party=REMOTE_IDP), None)


def test_resolve_responding_party_directory_errors_propagate() -> None:
    directory = FailingDirectory()
    with pytest.raises(RuntimeError):
        resolve_responding_party(make_state(bridged_party=REMOTE_IDP), directory)
    assert directory.calls == [(REMOTE_IDP, IDP_REMOTE)]


def test_resolve_from_metadata_sets_organization_only() -> None:
    state = make_state()
    assert resolve_from_metadata(
        state, IDP, state.responding_party_metadata, o_attribute="o", idp_blacklist=[],
    )
    assert state.attributes == {"o": ["Example University"]}


def test_resolve_from_metadata_sets_affiliation() -> None:
    state = make_state()
    assert resolve_from_metadata(
        state,
        IDP,
        state.responding_party_metadata,
        o_attribute="o",
        idp_blacklist=[],
        affiliation_attribute="eduPersonPrimaryAffiliation",
        affiliation="member",
    )
    assert state.attributes == {"o": ["Example University"], "eduPersonPrimaryAffiliation": ["member"]}


def test_resolve_from_metadata_skips_blacklisted_idp() -> None:
    state = make_state()
    assert not resolve_from_metadata(
        state, IDP, state.responding_party_metadata, o_attribute="o", idp_blacklist=[IDP],
    )
    assert state.attributes == {}


def test_resolve_from_metadata_overwrite() -> None:
    state = make_state({"o": ["Asserted"]})
    assert not resolve_from_metadata(
        state, IDP, state.responding_party_metadata, o_attribute="o", idp_blacklist=[], overwrite=False,
    )
    assert state.attributes == {"o": ["Asserted"]}

    assert resolve_from_metadata(
        state, IDP, state.responding_party_metadata, o_attribute="o", idp_blacklist=[],
    )
    assert state.attributes == {"o": ["Example University"]}


def test_resolve_from_metadata_empty_value_is_not_populated() -> None:
    state = make_state({"o": []})
    assert resolve_from_metadata(
        state, IDP, state.responding_party_metadata, o_attribute="o", idp_blacklist=[], overwrite=False,
    )
    assert state.attributes == {"o": ["Example University"]}


def test_resolve_from_metadata_without_organization() -> None:
    state = make_state(responding_party_metadata={"entityid": IDP})
    assert not resolve_from_metadata(
        state,
        IDP,
        state.responding_party_metadata,
        o_attribute="o",
        idp_blacklist=[],
        affiliation_attribute="eduPersonPrimaryAffiliation",
        affiliation="member",
    )
    assert state.attributes == {}
