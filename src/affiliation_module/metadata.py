"""
Reading the home organization out of IdP metadata.

Metadata records use the SAML metadata array layout, e.g.

    {
        'entityid': 'https://idp.example.org/idp',
        'UIInfo': {'DisplayName': {'en': 'Example University'}},
        'name': {'en': 'Example University'},
    }
"""

import logging
from typing import Any, Optional, Protocol
from .attributes import friendly_name
from .state import RequestState
from .util import AffiliationError

logger = logging.getLogger(__name__)

# The only metadata set we ever look in
IDP_REMOTE = 'saml20-idp-remote'

Metadata = dict[str, Any]


class MetadataDirectory(Protocol):
    def get_metadata(self, entity_id: str, category: str) -> Optional[Metadata]:
        ...


class InMemoryMetadataDirectory:
    """
    Metadata that has already been loaded by the host, keyed by category and entity ID
    """

    def __init__(self, entries: dict[str, dict[str, Metadata]] | None = None):
        self.entries = {category: dict(records) for category, records in (entries or {}).items()}

    def add(self, entity_id: str, metadata: Metadata, category: str = IDP_REMOTE):
        self.entries.setdefault(category, {})[entity_id] = metadata

    def get_metadata(self, entity_id: str, category: str) -> Optional[Metadata]:
        return self.entries.get(category, {}).get(entity_id)


def resolve_responding_party(state: RequestState, directory: MetadataDirectory | None) -> tuple[str | None, Metadata | None]:
    """
    Returns the IdP entity ID and its metadata.

    On a bridge the request records the proxy's own source, so the remote IdP
    named by state.bridged_party is looked up in the directory instead
    """
    if state.bridged_party:
        if directory is None:
            raise AffiliationError(f'no metadata directory to look up bridged IdP {state.bridged_party}')
        return state.bridged_party, directory.get_metadata(state.bridged_party, IDP_REMOTE)
    return state.responding_party, state.responding_party_metadata


def _english(names: Any) -> str | None:
    if isinstance(names, dict) and names.get('en'):
        return names['en']
    return None


def get_organization_name(metadata: Metadata | None) -> str | None:
    """
    The organization's English display name, falling back to its name
    """
    if not metadata:
        return None

    ui_info = metadata.get('UIInfo')
    if isinstance(ui_info, dict):
        display_name = _english(ui_info.get('DisplayName'))
        if display_name:
            return display_name

    name = metadata.get('name')
    if isinstance(name, str):
        return name or None
    return _english(name)


def resolve_from_metadata(
    state: RequestState,
    entity_id: str | None,
    metadata: Metadata | None,
    *,
    o_attribute: str,
    idp_blacklist: list[str],
    affiliation_attribute: str | None = None,
    affiliation: str | None = None,
    overwrite: bool = True,
    log_prefix: str = 'OrgFromIdPMetadata',
) -> bool:
    """
    Sets the organization attribute from IdP metadata, and the affiliation
    attribute too if both it and a value are given.
    Returns whether the attributes were updated
    """
    if entity_id in idp_blacklist:
        logger.debug("[%s] Skipping blacklisted IdP %r", log_prefix, entity_id)
        return False

    if not overwrite and state.attributes.get(o_attribute):
        logger.debug("[%s] %s attribute already exists in state", log_prefix, friendly_name(o_attribute))
        return False

    organization = get_organization_name(metadata)
    if not organization:
        logger.debug("[%s] No organization name in metadata of %r", log_prefix, entity_id)
        return False

    logger.debug("[%s] Found organization %r in metadata of %r", log_prefix, organization, entity_id)
    state.attributes[o_attribute] = [organization]
    if affiliation_attribute is not None and affiliation is not None:
        state.attributes[affiliation_attribute] = [affiliation]
    return True
