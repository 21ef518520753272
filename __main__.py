import pulumi_aws as aws
from pulumi import export, Config, Output, ResourceOptions

from static_frontend.component import ApiOrigin, ContentOrigin, LogsTarget, StaticFrontend
from static_frontend.config import ProviderSettings, StackSettings

# Read the configuration for this stack.
settings = StackSettings.from_pulumi_config(Config())
provider_settings = ProviderSettings.from_pulumi_config(Config('aws'))
target_domain = settings.target_domain

# Create an S3 bucket configured as a website bucket.
content_bucket = aws.s3.Bucket('contentBucket',
    bucket=target_domain,
    website=aws.s3.BucketWebsiteArgs(
        index_document='index.html',
        error_document='404.html'
    ),
    versioning=aws.s3.BucketVersioningArgs(
        enabled=True,
    ),
    lifecycle_rules=[aws.s3.BucketLifecycleRuleArgs(
        enabled=True,
        noncurrent_version_expiration=aws.s3.BucketLifecycleRuleNoncurrentVersionExpirationArgs(days=90),
        expiration=aws.s3.BucketLifecycleRuleExpirationArgs(expired_object_delete_marker=True)
    )],
    tags=settings.tags,
)

bucket_ownership_controls = aws.s3.BucketOwnershipControls("ContentBucketOwnershipControls",
    bucket=content_bucket.id,
    rule=aws.s3.BucketOwnershipControlsRuleArgs(object_ownership="BucketOwnerEnforced")
)

# The website endpoint is a plain HTTP origin, so objects must be publicly readable.
bucket_public_access_block = aws.s3.BucketPublicAccessBlock("ContentBucketPublicAccessBlock",
    bucket=content_bucket.id,
    block_public_acls=True,
    block_public_policy=False,
    ignore_public_acls=True,
    restrict_public_buckets=False
)

s3_policy = aws.iam.get_policy_document_output(statements=[aws.iam.GetPolicyDocumentStatementArgs(
    effect="Allow",
    actions=["s3:GetObject"],
    resources=[content_bucket.arn.apply(lambda arn: f"{arn}/*")],
    principals=[aws.iam.GetPolicyDocumentStatementPrincipalArgs(
        type="*",
        identifiers=["*"],
    )],
)])

bucket_policy = aws.s3.BucketPolicy("contentBucketPolicy",
    bucket=content_bucket.id,
    policy=s3_policy.json,
    opts=ResourceOptions(depends_on=[bucket_public_access_block])
)

# Use an existing logs bucket when one is configured; otherwise the frontend creates its own.
logs = None
if settings.logs_bucket_domain_name:
    logs = LogsTarget(domain_name=settings.logs_bucket_domain_name)

frontend = StaticFrontend('frontend',
    target_domain,
    content=ContentOrigin.from_bucket(content_bucket),
    api=ApiOrigin(url=settings.api_url),
    logs=logs,
    settings=provider_settings,
    validation_timeout=settings.validation_timeout,
    tags=settings.tags,
)

# Export the bucket URL, bucket website endpoint, and the CloudFront distribution information.
export('content_bucket_url', Output.concat('s3://', content_bucket.bucket))
export('content_bucket_website_endpoint', content_bucket.website_endpoint)
export('certificate_arn', frontend.certificate_arn)
export('cloudfront_domain', frontend.distribution_domain_name)
export('alias_record_fqdn', frontend.alias_record.fqdn)
export('target_domain_endpoint', frontend.url)
