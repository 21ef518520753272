"""
CloudFront distribution fronting the static content origin and the API origin.

The builders below return plain ``pulumi_aws.cloudfront`` argument objects so
the routing rules can be inspected without creating any resources.
Relevant documentation:
https://docs.aws.amazon.com/AmazonCloudFront/latest/DeveloperGuide/distribution-web-values-specify.html
"""

import re
from fnmatch import fnmatchcase
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pulumi
import pulumi_aws as aws

TEN_MINUTES = 60 * 10

API_ORIGIN_ID = 'api'
API_ORIGIN_PATH = '/stage'
API_PATH_PATTERN = '/api/*'

ALL_METHODS = ['DELETE', 'GET', 'HEAD', 'OPTIONS', 'PATCH', 'POST', 'PUT']

_URL_HOST = re.compile(r'^https?://([^/?#:]*).*$')

CacheBehavior = Union[
    aws.cloudfront.DistributionDefaultCacheBehaviorArgs,
    aws.cloudfront.DistributionOrderedCacheBehaviorArgs,
]


def api_origin_host(url: str) -> str:
    """Reduce an API endpoint URL to its bare host (no port), e.g. "https://abc.execute-api.../stage" => "abc.execute-api..."."""
    return _URL_HOST.sub(r'\1', url)


def api_origin_domain(url: pulumi.Input[str]) -> pulumi.Output[str]:
    return pulumi.Output.from_input(url).apply(api_origin_host)


def content_origin(origin_id: pulumi.Input[str], address: pulumi.Input[str]) -> aws.cloudfront.DistributionOriginArgs:
    # Website endpoints only speak plain HTTP.
    return aws.cloudfront.DistributionOriginArgs(
        origin_id=origin_id,
        domain_name=address,
        custom_origin_config=aws.cloudfront.DistributionOriginCustomOriginConfigArgs(
            origin_protocol_policy='http-only',
            http_port=80,
            https_port=443,
            origin_ssl_protocols=['TLSv1.2'],
        ),
    )


def api_origin(url: pulumi.Input[str]) -> aws.cloudfront.DistributionOriginArgs:
    return aws.cloudfront.DistributionOriginArgs(
        origin_id=API_ORIGIN_ID,
        domain_name=api_origin_domain(url),
        origin_path=API_ORIGIN_PATH,
        custom_origin_config=aws.cloudfront.DistributionOriginCustomOriginConfigArgs(
            origin_protocol_policy='https-only',
            http_port=80,
            https_port=443,
            origin_ssl_protocols=['TLSv1.2'],
        ),
    )


def default_cache_behavior(origin_id: pulumi.Input[str]) -> aws.cloudfront.DistributionDefaultCacheBehaviorArgs:
    return aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
        target_origin_id=origin_id,
        viewer_protocol_policy='redirect-to-https',
        allowed_methods=['GET', 'HEAD', 'OPTIONS'],
        cached_methods=['GET', 'HEAD', 'OPTIONS'],
        forwarded_values=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
            cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(forward='none'),
            query_string=False,
        ),
        min_ttl=0,
        default_ttl=TEN_MINUTES,
        max_ttl=TEN_MINUTES,
    )


def ordered_cache_behaviors() -> List[aws.cloudfront.DistributionOrderedCacheBehaviorArgs]:
    # Evaluated in order; the first matching path pattern wins.
    return [
        aws.cloudfront.DistributionOrderedCacheBehaviorArgs(
            path_pattern=API_PATH_PATTERN,
            target_origin_id=API_ORIGIN_ID,
            allowed_methods=ALL_METHODS,
            cached_methods=['HEAD', 'GET', 'OPTIONS'],
            min_ttl=0,
            default_ttl=0,
            max_ttl=0,
            forwarded_values=aws.cloudfront.DistributionOrderedCacheBehaviorForwardedValuesArgs(
                query_string=True,
                cookies=aws.cloudfront.DistributionOrderedCacheBehaviorForwardedValuesCookiesArgs(forward='all'),
            ),
            viewer_protocol_policy='redirect-to-https',
        ),
    ]


def custom_error_responses() -> List[aws.cloudfront.DistributionCustomErrorResponseArgs]:
    return [
        aws.cloudfront.DistributionCustomErrorResponseArgs(
            error_code=404,
            response_code=404,
            response_page_path='/404.html',
        ),
        # Unknown paths fall through to the single-page app's client-side router.
        aws.cloudfront.DistributionCustomErrorResponseArgs(
            error_code=403,
            response_code=200,
            response_page_path='/index.html',
        ),
    ]


def viewer_certificate(certificate_arn: pulumi.Input[str]) -> aws.cloudfront.DistributionViewerCertificateArgs:
    return aws.cloudfront.DistributionViewerCertificateArgs(
        acm_certificate_arn=certificate_arn,
        ssl_support_method='sni-only',
    )


def logging_config(bucket_domain_name: pulumi.Input[str], target_domain: str) -> aws.cloudfront.DistributionLoggingConfigArgs:
    return aws.cloudfront.DistributionLoggingConfigArgs(
        bucket=bucket_domain_name,
        include_cookies=False,
        prefix=f'{target_domain}/',
    )


def select_cache_behavior(
    path: str,
    default: aws.cloudfront.DistributionDefaultCacheBehaviorArgs,
    ordered: Sequence[aws.cloudfront.DistributionOrderedCacheBehaviorArgs],
) -> CacheBehavior:
    """Return the behavior CloudFront applies to a request path."""
    for behavior in ordered:
        # CloudFront patterns only know "*" and "?", both case sensitive.
        pattern = behavior.path_pattern.replace('[', '[[]')
        if fnmatchcase(path, pattern):
            return behavior
    return default


def remap_error(
    status: int,
    responses: Sequence[aws.cloudfront.DistributionCustomErrorResponseArgs],
) -> Optional[Tuple[int, str]]:
    for response in responses:
        if response.error_code == status:
            return response.response_code, response.response_page_path
    return None


def compose_distribution(
    name: str,
    target_domain: str,
    content_origin_id: pulumi.Input[str],
    content_address: pulumi.Input[str],
    api_url: pulumi.Input[str],
    certificate_arn: pulumi.Input[str],
    logs_bucket_domain_name: pulumi.Input[str],
    parent: pulumi.Resource,
    provider: Optional[aws.Provider] = None,
    depends_on: Optional[List[pulumi.Resource]] = None,
    tags: Optional[Dict[str, str]] = None,
) -> aws.cloudfront.Distribution:
    pulumi.log.info(f'Composing CloudFront distribution for {target_domain}', resource=parent)

    return aws.cloudfront.Distribution(
        f'{name}-cloudfront',
        enabled=True,
        aliases=[target_domain],
        origins=[
            content_origin(content_origin_id, content_address),
            api_origin(api_url),
        ],
        default_root_object='index.html',
        default_cache_behavior=default_cache_behavior(content_origin_id),
        ordered_cache_behaviors=ordered_cache_behaviors(),
        # PriceClass_100 is the lowest cost tier (US/EU only).
        price_class='PriceClass_100',
        custom_error_responses=custom_error_responses(),
        restrictions=aws.cloudfront.DistributionRestrictionsArgs(
            geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                restriction_type='none',
            ),
        ),
        # The arn only resolves after validation, so the binding never sees a pending certificate.
        viewer_certificate=viewer_certificate(certificate_arn),
        logging_config=logging_config(logs_bucket_domain_name, target_domain),
        tags=tags,
        opts=pulumi.ResourceOptions(parent=parent, provider=provider, depends_on=depends_on),
    )
