"""
Explicit configuration for the static frontend.

Library code never reads ambient provider defaults; the values below are
read once from Pulumi config by the program entry point and passed down.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

import pulumi

# Per AWS, certificates attached to CloudFront must live in us-east-1.
CERTIFICATE_REGION = 'us-east-1'

DEFAULT_VALIDATION_TIMEOUT = '45m'


@dataclass(frozen=True)
class ProviderSettings:
    """Selects credentials (profile) and the default execution context (region)."""

    profile: Optional[str] = None
    region: Optional[str] = None

    @classmethod
    def from_pulumi_config(cls, config: Optional[pulumi.Config] = None) -> 'ProviderSettings':
        config = config or pulumi.Config('aws')
        return cls(profile=config.get('profile'), region=config.get('region'))


@dataclass(frozen=True)
class StackSettings:
    """Program-level settings read from the stack configuration."""

    target_domain: str
    api_url: str
    logs_bucket_domain_name: Optional[str] = None
    validation_timeout: str = DEFAULT_VALIDATION_TIMEOUT
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_pulumi_config(cls, config: Optional[pulumi.Config] = None) -> 'StackSettings':
        config = config or pulumi.Config()
        return cls(
            target_domain=config.require('targetDomain'),
            api_url=config.require('apiUrl'),
            logs_bucket_domain_name=config.get('logsBucketDomainName'),
            validation_timeout=config.get('validationTimeout') or DEFAULT_VALIDATION_TIMEOUT,
            tags=config.get_object('tags') or {},
        )
