"""
StaticFrontend resource graph, run against Pulumi mocks.
"""

from unittest.mock import patch

import pulumi
import pytest

from static_frontend import component
from static_frontend.component import ApiOrigin, ContentOrigin, LogsTarget, StaticFrontend
from static_frontend.config import ProviderSettings
from static_frontend.errors import InvalidDomainError
from tests.conftest import CLOUDFRONT_ZONE_ID, DIST_DOMAIN, ZONE_ID, FrontendMocks

DOMAIN = "www.example.com"
API_URL = "https://abc123.execute-api.eu-west-1.amazonaws.com/stage"
WEBSITE = "www.example.com.s3-website-eu-west-1.amazonaws.com"

CERTIFICATE = "aws:acm/certificate:Certificate"
VALIDATION = "aws:acm/certificateValidation:CertificateValidation"
RECORD = "aws:route53/record:Record"
DISTRIBUTION = "aws:cloudfront/distribution:Distribution"
BUCKET = "aws:s3/bucket:Bucket"
PROVIDER = "pulumi:providers:aws"


def _frontend(logs=None, domain=DOMAIN):
    return StaticFrontend(
        "site",
        domain,
        content=ContentOrigin(origin_id="arn:aws:s3:::www.example.com", address=WEBSITE),
        api=ApiOrigin(url=API_URL),
        logs=logs,
        settings=ProviderSettings(profile="deploy", region="eu-west-1"),
        tags={"app": "site"},
    )


@pulumi.runtime.test
def test_exposes_validated_certificate_distribution_and_alias(mocks):
    frontend = _frontend()

    def check(args):
        certificate_arn, domain_name, hosted_zone_id, alias_name, alias_zone = args
        assert certificate_arn == "arn:aws:acm:us-east-1:123456789012:certificate/site-certificate"
        assert domain_name == DIST_DOMAIN
        assert hosted_zone_id == CLOUDFRONT_ZONE_ID
        assert alias_name == "www"
        assert alias_zone == ZONE_ID

    return pulumi.Output.all(
        frontend.certificate_arn,
        frontend.distribution.domain_name,
        frontend.distribution.hosted_zone_id,
        frontend.alias_record.name,
        frontend.alias_record.zone_id,
    ).apply(check)


@pulumi.runtime.test
def test_resources_register_in_dependency_order(mocks):
    frontend = _frontend()

    def check(_):
        validation_record, _ = mocks.registered(RECORD, "site-validation")
        validation, _ = mocks.registered(VALIDATION, "site-certificateValidation")
        distribution, _ = mocks.registered(DISTRIBUTION, "site-cloudfront")
        alias, _ = mocks.registered(RECORD, "site")
        assert validation_record < validation < distribution < alias

    return frontend.alias_record.id.apply(check)


@pulumi.runtime.test
def test_zone_is_looked_up_once_for_both_consumers(mocks):
    frontend = _frontend()

    def check(_):
        lookups = mocks.zone_lookups()
        assert len(lookups) == 1
        assert lookups[0]["name"] == "example.com."

        _, validation_record = mocks.registered(RECORD, "site-validation")
        _, alias = mocks.registered(RECORD, "site")
        assert validation_record["zoneId"] == alias["zoneId"] == ZONE_ID

    return frontend.alias_record.id.apply(check)


@pulumi.runtime.test
def test_certificate_lives_in_us_east_1_and_records_do_not(mocks):
    frontend = _frontend()

    def check(_):
        providers = {name: inputs for typ, name, inputs in mocks.created if typ == PROVIDER}
        assert providers["site-certificate-region"]["region"] == "us-east-1"
        assert providers["site-certificate-region"]["profile"] == "deploy"
        assert providers["site-provider"]["region"] == "eu-west-1"

        _, certificate = mocks.registered(CERTIFICATE, "site-certificate")
        assert certificate["domainName"] == DOMAIN
        assert certificate["validationMethod"] == "DNS"

    return frontend.certificate_arn.apply(check)


@pulumi.runtime.test
def test_validation_record_publishes_the_first_challenge(mocks):
    frontend = _frontend()

    def check(_):
        _, record = mocks.registered(RECORD, "site-validation")
        assert record["name"] == f"_3639ac514e785e898d2646601fa951d5.{DOMAIN}."
        assert record["type"] == "CNAME"
        assert record["records"] == ["_98d2646601fa951d5.acm-validations.aws."]
        assert record["ttl"] == 600

        _, validation = mocks.registered(VALIDATION, "site-certificateValidation")
        assert validation["validationRecordFqdns"] == [record["name"]]

    return frontend.certificate_arn.apply(check)


@pulumi.runtime.test
def test_distribution_binds_the_validated_certificate(mocks):
    frontend = _frontend()

    def check(certificate_arn):
        _, distribution = mocks.registered(DISTRIBUTION, "site-cloudfront")
        assert distribution["aliases"] == [DOMAIN]
        assert distribution["viewerCertificate"]["acmCertificateArn"] == certificate_arn
        assert distribution["viewerCertificate"]["sslSupportMethod"] == "sni-only"
        assert distribution["priceClass"] == "PriceClass_100"

        origins = {origin["originId"]: origin for origin in distribution["origins"]}
        assert origins["api"]["domainName"] == "abc123.execute-api.eu-west-1.amazonaws.com"
        assert origins["api"]["originPath"] == "/stage"
        assert origins["arn:aws:s3:::www.example.com"]["domainName"] == WEBSITE

    return frontend.distribution.id.apply(lambda _: frontend.certificate_arn).apply(check)


@pulumi.runtime.test
def test_default_logs_bucket_is_created_and_owned(mocks):
    frontend = _frontend()
    assert frontend.logs_bucket is not None

    def check(_):
        _, bucket = mocks.registered(BUCKET, "site-front-logs")
        assert bucket["bucket"] == "www.example.com-logs"

        _, distribution = mocks.registered(DISTRIBUTION, "site-cloudfront")
        assert distribution["loggingConfig"]["bucket"] == "www.example.com-logs.s3.amazonaws.com"
        assert distribution["loggingConfig"]["prefix"] == "www.example.com/"

    return frontend.distribution.id.apply(check)


@pulumi.runtime.test
def test_supplied_logs_target_is_used_as_is(mocks):
    frontend = _frontend(logs=LogsTarget(domain_name="shared-logs.s3.amazonaws.com"))
    assert frontend.logs_bucket is None

    def check(_):
        assert not [name for typ, name, _ in mocks.created if typ == BUCKET]
        _, distribution = mocks.registered(DISTRIBUTION, "site-cloudfront")
        assert distribution["loggingConfig"]["bucket"] == "shared-logs.s3.amazonaws.com"

    return frontend.distribution.id.apply(check)


@pulumi.runtime.test
def test_apex_domain_alias_has_empty_name(mocks):
    frontend = _frontend(domain="example.com")

    def check(_):
        assert mocks.zone_lookups()[0]["name"] == "example.com"
        _, alias = mocks.registered(RECORD, "site")
        assert alias["name"] == ""
        assert alias["aliases"][0]["evaluateTargetHealth"] is True

    return frontend.alias_record.id.apply(check)


def test_invalid_domain_fails_before_any_resource(mocks):
    with pytest.raises(InvalidDomainError):
        _frontend(domain="localhost")

    assert mocks.created == []


@pulumi.runtime.test
def test_distribution_waits_for_the_logs_bucket_acl(mocks):
    with patch.object(component, "compose_distribution", wraps=component.compose_distribution) as compose:
        frontend = _frontend()

    depends_on = compose.call_args.kwargs["depends_on"]
    assert frontend.certificate.validation in depends_on
    assert frontend.logs_bucket_acl in depends_on
    return frontend.distribution.id


@pulumi.runtime.test
def test_supplied_logs_target_adds_no_bucket_dependency(mocks):
    with patch.object(component, "compose_distribution", wraps=component.compose_distribution) as compose:
        frontend = _frontend(logs=LogsTarget(domain_name="shared-logs.s3.amazonaws.com"))

    assert frontend.logs_bucket_acl is None
    assert compose.call_args.kwargs["depends_on"] == [frontend.certificate.validation]
    return frontend.distribution.id


def test_provider_settings_are_required(mocks):
    with pytest.raises(TypeError):
        StaticFrontend(
            "site",
            DOMAIN,
            content=ContentOrigin(origin_id="arn:aws:s3:::www.example.com", address=WEBSITE),
            api=ApiOrigin(url=API_URL),
        )

    assert mocks.created == []


def _record_run():
    run_mocks = FrontendMocks()
    pulumi.runtime.set_mocks(run_mocks, preview=False)

    @pulumi.runtime.test
    def run():
        return _frontend().alias_record.id

    run()
    return sorted(run_mocks.created, key=lambda created: (created[0], created[1]))


def test_rerun_with_identical_inputs_registers_identical_resources():
    assert _record_run() == _record_run()
