"""
Sets the home organization (o) from the friendly name in the IdP metadata,
unless the attribute was already asserted.

Example configuration:

    module: affiliation_module.OrgFromIdPMetadata
    config:
      # Optional, defaults to urn:oid:2.5.4.10
      oAttribute: o
      # Optional, also assert this primary affiliation along with the organization
      defaultAffiliation: member
      spBlacklist:
        - https://sp1.example.org
      idpBlacklist:
        - https://idp1.example.org
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional
from dataclasses_json import dataclass_json, LetterCase, Undefined
from synapse.module_api.errors import ConfigError
from .attributes import EDU_PERSON_PRIMARY_AFFILIATION, ORGANIZATION_NAME
from .metadata import MetadataDirectory, resolve_from_metadata, resolve_responding_party
from .state import RequestState
from .util import (
    rename_legacy_option,
    report_fatal_errors,
    require_optional_string,
    require_string,
    require_string_list,
)

logger = logging.getLogger(__name__)

NAME = 'OrgFromIdPMetadata'


@dataclass_json(letter_case=LetterCase.CAMEL, undefined=Undefined.RAISE)
@dataclass
class Config:
    o_attribute: str = ORGANIZATION_NAME
    affiliation_attribute: str = EDU_PERSON_PRIMARY_AFFILIATION
    # Not set by default
    default_affiliation: Optional[str] = None
    sp_blacklist: list[str] = field(default_factory=list)
    idp_blacklist: list[str] = field(default_factory=list)


class OrgFromIdPMetadata:
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
        require_string(config, 'oAttribute', NAME)
        require_string(config, 'affiliationAttribute', NAME)
        require_optional_string(config, 'defaultAffiliation', NAME)
        require_string_list(config, 'spBlacklist', NAME)
        require_string_list(config, 'idpBlacklist', NAME)
        try:
            return Config.from_dict(config)
        except Exception as e:
            raise ConfigError(f'{NAME} configuration error: {e}')

    @report_fatal_errors
    def process(self, state: RequestState) -> None:
        if state.requesting_party is not None and state.requesting_party in self.config.sp_blacklist:
            logger.debug("[%s] Skipping blacklisted SP %r", NAME, state.requesting_party)
            return

        idp_entity_id, idp_metadata = resolve_responding_party(state, self.metadata)

        if resolve_from_metadata(
            state,
            idp_entity_id,
            idp_metadata,
            o_attribute=self.config.o_attribute,
            idp_blacklist=self.config.idp_blacklist,
            affiliation_attribute=self.config.affiliation_attribute,
            affiliation=self.config.default_affiliation,
            overwrite=False,
            log_prefix=NAME,
        ):
            logger.debug("[%s] updated attributes=%r", NAME, state.attributes)
