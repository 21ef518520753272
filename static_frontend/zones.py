"""
Resolving the externally managed Route 53 zone that owns a parent domain.
"""

import re
from typing import Callable, Dict, Optional

import pulumi
import pulumi_aws as aws

from static_frontend.errors import ZoneNotFoundError

# The provider reports a missing zone as e.g. "no matching Route 53 Hosted Zone found".
_NOT_FOUND = re.compile(r'no matching route ?53 ?(hosted )?zone', re.IGNORECASE)


class ZoneResolver:
    """
    Looks up zone ids by parent domain, at most once per domain.

    One resolver is created per orchestration run; every consumer asking for
    the same parent domain receives the same deferred zone id.
    """

    def __init__(
        self,
        lookup: Callable = aws.route53.get_zone,
        invoke_opts: Optional[pulumi.InvokeOptions] = None,
    ):
        self._lookup = lookup
        self._invoke_opts = invoke_opts
        self._zones: Dict[str, pulumi.Output[str]] = {}

    def lookup_zone_id(self, parent_domain: str) -> str:
        pulumi.log.debug(f'Looking up hosted zone for {parent_domain}')
        try:
            zone = self._lookup(name=parent_domain, private_zone=False, opts=self._invoke_opts)
        except Exception as e:
            if _NOT_FOUND.search(str(e)):
                raise ZoneNotFoundError(parent_domain, str(e)) from e
            raise
        return zone.zone_id

    def resolve(self, parent_domain: str) -> pulumi.Output[str]:
        # Blocking get_zone inside apply, not get_zone_output, so a missing zone can be re-raised as ZoneNotFoundError.
        if parent_domain not in self._zones:
            self._zones[parent_domain] = pulumi.Output.from_input(parent_domain).apply(self.lookup_zone_id)
        return self._zones[parent_domain]
