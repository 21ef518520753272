"""
Splitting a fully-qualified domain into its leaf subdomain and parent domain.
"""

from typing import NamedTuple

from static_frontend.errors import InvalidDomainError


class DomainParts(NamedTuple):
    subdomain: str
    parent_domain: str

    @property
    def fqdn(self) -> str:
        parent = self.parent_domain.rstrip('.')
        if not self.subdomain:
            return parent
        return f'{self.subdomain}.{parent}'


def split_domain(domain: str) -> DomainParts:
    """Split a domain name into its subdomain and parent domain names.

    e.g. "www.example.com" => "www", "example.com."
    """
    parts = domain.split('.')
    if len(parts) < 2:
        raise InvalidDomainError(domain)
    if len(parts) == 2:
        return DomainParts(subdomain='', parent_domain=domain)

    # Trailing "." to canonicalize the parent domain for zone lookups.
    return DomainParts(subdomain=parts[0], parent_domain='.'.join(parts[1:]) + '.')
