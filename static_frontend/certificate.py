"""
TLS certificate for the target domain, validated through a DNS record.
"""

from typing import Dict, Optional

import pulumi
import pulumi_aws as aws

from static_frontend.config import CERTIFICATE_REGION, DEFAULT_VALIDATION_TIMEOUT, ProviderSettings

TEN_MINUTES = 60 * 10


class ProvisionedCertificate:
    """The certificate, its validation record and the validation that ties them together."""

    def __init__(
        self,
        certificate: aws.acm.Certificate,
        validation_record: aws.route53.Record,
        validation: aws.acm.CertificateValidation,
    ):
        self.certificate = certificate
        self.validation_record = validation_record
        self.validation = validation

    @property
    def certificate_arn(self) -> pulumi.Output[str]:
        # Only known once the authority has confirmed the DNS challenge.
        return self.validation.certificate_arn


def certificate_provider(name: str, settings: ProviderSettings, parent: pulumi.Resource) -> aws.Provider:
    return aws.Provider(
        f'{name}-certificate-region',
        profile=settings.profile,
        region=CERTIFICATE_REGION,
        opts=pulumi.ResourceOptions(parent=parent),
    )


def provision_certificate(
    name: str,
    target_domain: str,
    zone_id: pulumi.Input[str],
    provider: aws.Provider,
    parent: pulumi.Resource,
    record_provider: Optional[aws.Provider] = None,
    validation_timeout: str = DEFAULT_VALIDATION_TIMEOUT,
    tags: Optional[Dict[str, str]] = None,
) -> ProvisionedCertificate:
    pulumi.log.info(f'Requesting DNS-validated certificate for {target_domain}', resource=parent)

    certificate = aws.acm.Certificate(
        f'{name}-certificate',
        domain_name=target_domain,
        validation_method='DNS',
        tags=tags,
        opts=pulumi.ResourceOptions(parent=parent, provider=provider),
    )

    # Single-domain certificate: the authority emits one option for target_domain.
    option = certificate.domain_validation_options.apply(lambda options: options[0])
    validation_record = aws.route53.Record(
        f'{name}-validation',
        name=option.resource_record_name,
        zone_id=zone_id,
        type=option.resource_record_type,
        records=[option.resource_record_value],
        ttl=TEN_MINUTES,
        allow_overwrite=True,
        opts=pulumi.ResourceOptions(parent=parent, provider=record_provider),
    )

    validation = aws.acm.CertificateValidation(
        f'{name}-certificateValidation',
        certificate_arn=certificate.arn,
        validation_record_fqdns=[validation_record.fqdn],
        opts=pulumi.ResourceOptions(
            parent=parent,
            provider=provider,
            depends_on=[validation_record],
            custom_timeouts=pulumi.CustomTimeouts(create=validation_timeout),
        ),
    )

    return ProvisionedCertificate(certificate, validation_record, validation)
