"""
Derives the primary affiliation and the home organization of a user
from their scoped affiliation (e.g. eduPersonScopedAffiliation).

The first scoped value sets both attributes: the scope becomes the home
organization and the affiliation becomes the primary affiliation. Any of
faculty, staff, student, employee or member turns into "member" and wins
outright. Otherwise later values keep overwriting earlier ones, so the
last scoped value decides.

Without any scoped value, the organization is taken from the IdP metadata
and the primary affiliation defaults to "member".

Example configuration:

    module: affiliation_module.PrimaryAffiliation
    config:
      # Optional, defaults to eduPersonScopedAffiliation.
      # A list is tried in order, the first attribute with values is used
      scopedAffiliation:
        - urn:oid:1.3.6.1.4.1.25178.4.1.11
        - urn:oid:1.3.6.1.4.1.5923.1.1.1.9
      # Optional, defaults to urn:oid:2.5.4.10
      oAttribute: urn:oid:1.3.6.1.4.1.25178.1.2.9
      # Optional list of SP entity IDs that should be excluded
      spBlacklist:
        - https://sp1.example.org
      # Optional list of IdP entity IDs whose metadata should not be used
      idpBlacklist:
        - https://idp1.example.org
"""

import logging
from dataclasses import dataclass, field
from typing import Callable
from dataclasses_json import dataclass_json, LetterCase, Undefined
from synapse.module_api.errors import ConfigError
from .attributes import (
    EDU_PERSON_PRIMARY_AFFILIATION,
    EDU_PERSON_SCOPED_AFFILIATION,
    MEMBER,
    ORGANIZATION_NAME,
    friendly_name,
    is_member_affiliation,
    parse_scoped,
)
from .metadata import MetadataDirectory, resolve_from_metadata, resolve_responding_party
from .state import RequestState
from .util import (
    rename_legacy_option,
    report_fatal_errors,
    require_string,
    require_string_list,
    require_string_or_list,
)

logger = logging.getLogger(__name__)

NAME = 'PrimaryAffiliation'


@dataclass_json(letter_case=LetterCase.CAMEL, undefined=Undefined.RAISE)
@dataclass
class Config:
    # Candidate attribute names, in order of preference
    scoped_affiliation: list[str] = field(default_factory=lambda: [EDU_PERSON_SCOPED_AFFILIATION])
    o_attribute: str = ORGANIZATION_NAME
    affiliation_attribute: str = EDU_PERSON_PRIMARY_AFFILIATION
    sp_blacklist: list[str] = field(default_factory=list)
    idp_blacklist: list[str] = field(default_factory=list)


class PrimaryAffiliation:
    def __init__(
        self,
        config: Config,
        metadata: MetadataDirectory | None = None,
        report_fatal: Callable[[BaseException, RequestState], None] | None = None,
    ):
        self.config = config
        self.metadata = metadata
        self.report_fatal = report_fatal

    @staticmethod
    def parse_config(config: dict) -> Config:
        config = rename_legacy_option(config, 'blacklist', 'spBlacklist', NAME)
        require_string_or_list(config, 'scopedAffiliation', NAME)
        require_string(config, 'oAttribute', NAME)
        require_string(config, 'affiliationAttribute', NAME)
        require_string_list(config, 'spBlacklist', NAME)
        require_string_list(config, 'idpBlacklist', NAME)
        if isinstance(config.get('scopedAffiliation'), str):
            config = {**config, 'scopedAffiliation': [config['scopedAffiliation']]}
        try:
            return Config.from_dict(config)
        except Exception as e:
            raise ConfigError(f'{NAME} configuration error: {e}')

    def find_scoped_affiliation(self, state: RequestState) -> list[str]:
        for name in self.config.scoped_affiliation:
            values = state.attributes.get(name)
            if values:
                return values
        return []

    def apply_scoped_affiliation(self, state: RequestState, values: list[str]) -> bool:
        """
        Returns False if none of the values were scoped
        """
        found = False
        for value in values:
            logger.debug("[%s] Scoped affiliation value found: %r", NAME, value)
            scoped = parse_scoped(value)
            if scoped is None:
                continue
            found = True
            affiliation, scope = scoped
            state.attributes[self.config.o_attribute] = [scope]
            if is_member_affiliation(affiliation):
                state.attributes[self.config.affiliation_attribute] = [MEMBER]
                break
            state.attributes[self.config.affiliation_attribute] = [affiliation]
        return found

    @report_fatal_errors
    def process(self, state: RequestState) -> None:
        if state.requesting_party is not None and state.requesting_party in self.config.sp_blacklist:
            logger.debug("[%s] Skipping blacklisted SP %r", NAME, state.requesting_party)
            return

        idp_entity_id, idp_metadata = resolve_responding_party(state, self.metadata)

        if self.apply_scoped_affiliation(state, self.find_scoped_affiliation(state)):
            logger.debug("[%s] updated attributes=%r", NAME, state.attributes)
            return

        logger.debug(
            "[%s] No scoped %s value, falling back to IdP metadata",
            NAME, ' or '.join(friendly_name(name) for name in self.config.scoped_affiliation),
        )
        if resolve_from_metadata(
            state,
            idp_entity_id,
            idp_metadata,
            o_attribute=self.config.o_attribute,
            idp_blacklist=self.config.idp_blacklist,
            affiliation_attribute=self.config.affiliation_attribute,
            affiliation=MEMBER,
            log_prefix=NAME,
        ):
            logger.debug("[%s] updated attributes=%r", NAME, state.attributes)
