"""
A CDN-fronted, TLS-secured domain serving static content with an API behind /api/*.

``StaticFrontend`` owns the certificate, its validation record, the
distribution, the alias record and (when none is supplied) the access logs
bucket. The hosted zone is only looked up, never owned.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import pulumi
import pulumi_aws as aws

from static_frontend.alias import publish_alias
from static_frontend.certificate import certificate_provider, provision_certificate
from static_frontend.config import DEFAULT_VALIDATION_TIMEOUT, ProviderSettings
from static_frontend.distribution import compose_distribution
from static_frontend.domains import split_domain
from static_frontend.zones import ZoneResolver

ID = 'static-frontend:index:StaticFrontend'


@dataclass
class ContentOrigin:
    """Website-style endpoint of the static content store."""

    origin_id: pulumi.Input[str]
    address: pulumi.Input[str]

    @classmethod
    def from_bucket(cls, bucket: aws.s3.Bucket) -> 'ContentOrigin':
        return cls(origin_id=bucket.arn, address=bucket.website_endpoint)


@dataclass
class ApiOrigin:
    """Base URL of the API backend; only its host is used."""

    url: pulumi.Input[str]


@dataclass
class LogsTarget:
    domain_name: pulumi.Input[str]

    @classmethod
    def from_bucket(cls, bucket: aws.s3.Bucket) -> 'LogsTarget':
        return cls(domain_name=bucket.bucket_domain_name)


class StaticFrontend(pulumi.ComponentResource):
    """
    Certificate, distribution and alias record for one target domain.

    Outputs:
        certificate_arn: arn of the validated certificate.
        distribution: the CloudFront distribution (endpoint and hosted zone id).
        alias_record: the Route 53 alias record for the target domain.
    """

    def __init__(
        self,
        name: str,
        target_domain: str,
        content: ContentOrigin,
        api: ApiOrigin,
        settings: ProviderSettings,
        logs: Optional[LogsTarget] = None,
        validation_timeout: str = DEFAULT_VALIDATION_TIMEOUT,
        tags: Optional[Dict[str, str]] = None,
        opts: Optional[pulumi.ResourceOptions] = None,
    ):
        # Fail on a malformed domain before anything is registered.
        domain_parts = split_domain(target_domain)

        super().__init__(ID, name, None, opts)

        # Explicit providers never read the stack's aws:region; a None region falls back to AWS_REGION.
        self.provider = aws.Provider(
            f'{name}-provider',
            profile=settings.profile,
            region=settings.region,
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.certificate_provider = certificate_provider(name, settings, parent=self)

        # One resolver per run: certificate validation and the alias share a single lookup.
        zones = ZoneResolver(invoke_opts=pulumi.InvokeOptions(provider=self.provider))
        zone_id = zones.resolve(domain_parts.parent_domain)

        distribution_depends_on = []
        if logs is None:
            self.logs_bucket, self.logs_bucket_acl = self._create_logs_bucket(name, target_domain, tags)
            logs = LogsTarget.from_bucket(self.logs_bucket)
            # CloudFront rejects a logging bucket until its ACL is writable.
            distribution_depends_on.append(self.logs_bucket_acl)
        else:
            self.logs_bucket = None
            self.logs_bucket_acl = None

        self.certificate = provision_certificate(
            name,
            target_domain,
            zone_id,
            provider=self.certificate_provider,
            parent=self,
            record_provider=self.provider,
            validation_timeout=validation_timeout,
            tags=tags,
        )

        self.distribution = compose_distribution(
            name,
            target_domain,
            content_origin_id=content.origin_id,
            content_address=content.address,
            api_url=api.url,
            certificate_arn=self.certificate.certificate_arn,
            logs_bucket_domain_name=logs.domain_name,
            parent=self,
            provider=self.provider,
            depends_on=[self.certificate.validation, *distribution_depends_on],
            tags=tags,
        )

        self.alias_record = publish_alias(
            name,
            domain_parts,
            zone_id,
            self.distribution,
            parent=self,
            provider=self.provider,
        )

        self.certificate_arn = self.certificate.certificate_arn
        self.distribution_domain_name = self.distribution.domain_name
        self.url = pulumi.Output.concat('https://', target_domain, '/')

        self.register_outputs({
            'certificate_arn': self.certificate_arn,
            'distribution': self.distribution,
            'alias_record': self.alias_record,
        })

    def _create_logs_bucket(self, name: str, target_domain: str, tags: Optional[Dict[str, str]]) -> Tuple[aws.s3.Bucket, aws.s3.BucketAclV2]:
        logs_bucket = aws.s3.Bucket(
            f'{name}-front-logs',
            bucket=f'{target_domain}-logs',
            force_destroy=True,
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self, provider=self.provider),
        )

        aws.s3.BucketPublicAccessBlock(
            f'{name}-front-logs-public-access-block',
            bucket=logs_bucket.id,
            block_public_acls=True,
            block_public_policy=True,
            ignore_public_acls=True,
            restrict_public_buckets=True,
            opts=pulumi.ResourceOptions(parent=self, provider=self.provider),
        )

        # CloudFront writes logs through ACLs, which need preferred ownership.
        ownership_controls = aws.s3.BucketOwnershipControls(
            f'{name}-front-logs-ownership-controls',
            bucket=logs_bucket.id,
            rule=aws.s3.BucketOwnershipControlsRuleArgs(object_ownership='BucketOwnerPreferred'),
            opts=pulumi.ResourceOptions(parent=self, provider=self.provider),
        )

        logs_acl = aws.s3.BucketAclV2(
            f'{name}-front-logs-acl',
            bucket=logs_bucket.id,
            acl='private',
            opts=pulumi.ResourceOptions(parent=self, provider=self.provider, depends_on=[ownership_controls]),
        )

        return logs_bucket, logs_acl
