# see:
# https://pysaml2.readthedocs.io/en/latest/howto/config.html#attribute-map-dir
# https://wiki.refeds.org/display/STAN/eduPerson
# https://voperson.org/

# This doubles as a pysaml2 attribute map, so compute the inverse instead of rewriting

__map_to = {
    'eduPersonPrincipalName': 'urn:oid:1.3.6.1.4.1.5923.1.1.1.6',
    'eduPersonAffiliation': 'urn:oid:1.3.6.1.4.1.5923.1.1.1.1',
    'eduPersonPrimaryAffiliation': 'urn:oid:1.3.6.1.4.1.5923.1.1.1.5',
    'eduPersonScopedAffiliation': 'urn:oid:1.3.6.1.4.1.5923.1.1.1.9',
    'voPersonExternalAffiliation': 'urn:oid:1.3.6.1.4.1.25178.4.1.11',
    'schacHomeOrganization': 'urn:oid:1.3.6.1.4.1.25178.1.2.9',
    # organizationName, RFC4519
    'o': 'urn:oid:2.5.4.10',
    'cn': 'urn:oid:2.5.4.3',
    'displayName': 'urn:oid:2.16.840.1.113730.3.1.241',
    'email': 'urn:oid:0.9.2342.19200300.100.1.3',
}

MAP = {
    'identifier': 'urn:oasis:names:tc:SAML:2.0:attrname-format:uri',
    'to': __map_to,
    'fro': {v:k for k,v in __map_to.items()},
}

EDU_PERSON_SCOPED_AFFILIATION = MAP['to']['eduPersonScopedAffiliation']
EDU_PERSON_PRIMARY_AFFILIATION = MAP['to']['eduPersonPrimaryAffiliation']
VO_PERSON_EXTERNAL_AFFILIATION = MAP['to']['voPersonExternalAffiliation']
ORGANIZATION_NAME = MAP['to']['o']

MEMBER = 'member'

# Affiliations that collapse to "member"
MEMBER_AFFILIATIONS = frozenset({
    'faculty',
    'staff',
    'student',
    'employee',
    MEMBER,
})


def friendly_name(name: str) -> str:
    return MAP['fro'].get(name, name)


def parse_scoped(value: str) -> tuple[str, str] | None:
    """
    Splits a scoped value like student@mit.edu into ('student', 'mit.edu').
    Only the first @ counts, so the scope may contain more of them.
    Returns None if the value is not scoped at all
    """
    if '@' not in value:
        return None
    role, scope = value.split('@', maxsplit=1)
    return role, scope


def is_member_affiliation(role: str) -> bool:
    return role in MEMBER_AFFILIATIONS
