# How to install and register:
# i.e. bin/pip install ~/affiliation_module/
# then list the steps in the authentication pipeline, in order, e.g.
#
#   - module: affiliation_module.PrimaryAffiliation
#     config: {...}
#
# The host calls parse_config once, constructs the step with the parsed config
# and calls process(state) for every request.

from .metadata import IDP_REMOTE, InMemoryMetadataDirectory, MetadataDirectory, get_organization_name
from .org_from_metadata import OrgFromIdPMetadata
from .primary_affiliation import PrimaryAffiliation
from .state import RequestState
from .util import AffiliationError, HtmlErrorReporter, ProcessingHalted

__all__ = [
    'IDP_REMOTE',
    'AffiliationError',
    'HtmlErrorReporter',
    'InMemoryMetadataDirectory',
    'MetadataDirectory',
    'OrgFromIdPMetadata',
    'PrimaryAffiliation',
    'ProcessingHalted',
    'RequestState',
    'get_organization_name',
]
