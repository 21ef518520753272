"""
DNS alias record pointing the target domain at the distribution.
"""

from typing import Optional

import pulumi
import pulumi_aws as aws

from static_frontend.domains import DomainParts


def publish_alias(
    name: str,
    domain_parts: DomainParts,
    zone_id: pulumi.Input[str],
    distribution: aws.cloudfront.Distribution,
    parent: pulumi.Resource,
    provider: Optional[aws.Provider] = None,
) -> aws.route53.Record:
    pulumi.log.info(f'Publishing alias record for {domain_parts.fqdn}', resource=parent)

    return aws.route53.Record(
        name,
        name=domain_parts.subdomain,
        zone_id=zone_id,
        type='A',
        aliases=[aws.route53.RecordAliasArgs(
            name=distribution.domain_name,
            zone_id=distribution.hosted_zone_id,
            evaluate_target_health=True,
        )],
        opts=pulumi.ResourceOptions(parent=parent, provider=provider),
    )
