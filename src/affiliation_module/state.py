from dataclasses import dataclass, field
from typing import Any, Optional
from dataclasses_json import config, dataclass_json


@dataclass_json
@dataclass
class RequestState:
    """
    Everything a step gets to see about one authentication request.
    The host owns it; steps mutate `attributes` in place.
    """
    # attribute name -> values, as asserted by the IdP
    attributes: dict[str, list[str]] = field(default_factory=dict)
    # SP entity ID
    requesting_party: Optional[str] = None
    # IdP entity ID and its metadata, as recorded by the host
    responding_party: Optional[str] = None
    responding_party_metadata: Optional[dict[str, Any]] = None
    # When running on a bridge this is the entity ID of the remote IdP,
    # whose metadata has to be looked up instead
    bridged_party: Optional[str] = None
    # The host's HTTP request being answered, if any. Only used to render error pages
    request: Any = field(default=None, compare=False, repr=False, metadata=config(exclude=lambda _: True))
