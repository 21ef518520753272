"""
Running the static frontend as one provisionable unit through the Automation API.

``up`` converges the stack (a re-run with identical inputs changes nothing) and
``destroy`` tears the owned resources down in reverse dependency order.
Engine failures are re-raised as the matching ``StaticFrontendError`` with the
engine's text unchanged; anything unrecognised propagates as-is.
"""

import re
from typing import Any, Callable, Dict, Optional, Type

import pulumi
from pulumi import automation as auto

from static_frontend.component import ApiOrigin, ContentOrigin, LogsTarget, StaticFrontend
from static_frontend.config import ProviderSettings
from static_frontend.domains import split_domain
from static_frontend.errors import (
    InvalidDomainError,
    ResourceConflictError,
    StaticFrontendError,
    ValidationTimeoutError,
    ZoneNotFoundError,
)

PROJECT_NAME = 'static-frontend'

_ENGINE_ERRORS = [
    (re.compile(r"timeout while waiting for state to become 'ISSUED'"), ValidationTimeoutError),
    (re.compile(r'no matching route ?53 ?(hosted )?zone|ZoneNotFoundError', re.IGNORECASE), ZoneNotFoundError),
    (re.compile(r'already exists|CNAMEAlreadyExists|BucketAlreadyExists|BucketAlreadyOwnedByYou'), ResourceConflictError),
    (re.compile(r'InvalidDomainError'), InvalidDomainError),
]


def classify_engine_error(message: str) -> Optional[Type[StaticFrontendError]]:
    for pattern, error_type in _ENGINE_ERRORS:
        if pattern.search(message):
            return error_type
    return None


def translate_engine_error(err: Exception, target_domain: Optional[str] = None) -> Exception:
    message = str(err)
    error_type = classify_engine_error(message)
    if error_type is None:
        return err
    if error_type is ZoneNotFoundError:
        parent_domain = split_domain(target_domain).parent_domain if target_domain else ''
        return ZoneNotFoundError(parent_domain, message)
    if error_type is InvalidDomainError:
        return InvalidDomainError(target_domain or '', message)
    return error_type(message)


def apply_settings(stack: auto.Stack, settings: ProviderSettings) -> None:
    if settings.profile:
        stack.set_config('aws:profile', auto.ConfigValue(value=settings.profile))
    if settings.region:
        stack.set_config('aws:region', auto.ConfigValue(value=settings.region))


def _program(
    name: str,
    target_domain: str,
    content: ContentOrigin,
    api: ApiOrigin,
    logs: Optional[LogsTarget],
    settings: ProviderSettings,
) -> Callable[[], None]:
    def program():
        frontend = StaticFrontend(name, target_domain, content, api, logs=logs, settings=settings)
        pulumi.export('certificate_arn', frontend.certificate_arn)
        pulumi.export('distribution_endpoint', frontend.distribution.domain_name)
        pulumi.export('distribution_hosted_zone_id', frontend.distribution.hosted_zone_id)
        pulumi.export('alias_record_name', frontend.alias_record.name)
        pulumi.export('alias_record_zone_id', frontend.alias_record.zone_id)

    return program


def up(
    name: str,
    target_domain: str,
    content: ContentOrigin,
    api: ApiOrigin,
    logs: Optional[LogsTarget] = None,
    *,
    stack_name: str = 'dev',
    project_name: str = PROJECT_NAME,
    settings: Optional[ProviderSettings] = None,
    on_output: Callable[[str], Any] = pulumi.log.info,
) -> Dict[str, Any]:
    """
    Provision (or converge) the unit and return its three outputs.

    Raises:
        InvalidDomainError: before touching the engine, if target_domain is malformed.
        ZoneNotFoundError, ValidationTimeoutError, ResourceConflictError: on the
            matching engine failure.
    """
    split_domain(target_domain)
    settings = settings or ProviderSettings()

    stack = auto.create_or_select_stack(
        stack_name=stack_name,
        project_name=project_name,
        program=_program(name, target_domain, content, api, logs, settings),
    )
    apply_settings(stack, settings)

    pulumi.log.debug(f'Running up for {project_name}/{stack_name} ({target_domain})')
    try:
        result = stack.up(on_output=on_output)
    except auto.CommandError as e:
        translated = translate_engine_error(e, target_domain)
        if translated is e:
            raise
        raise translated from e

    outputs = result.outputs
    return {
        'certificate_arn': outputs['certificate_arn'].value,
        'distribution': {
            'endpoint': outputs['distribution_endpoint'].value,
            'hosted_zone_id': outputs['distribution_hosted_zone_id'].value,
        },
        'alias_record': {
            'name': outputs['alias_record_name'].value,
            'zone_id': outputs['alias_record_zone_id'].value,
        },
    }


def destroy(
    stack_name: str = 'dev',
    project_name: str = PROJECT_NAME,
    settings: Optional[ProviderSettings] = None,
    on_output: Callable[[str], Any] = pulumi.log.info,
) -> None:
    """Tear the unit down; the hosted zone is never part of the stack, so it is left alone."""
    settings = settings or ProviderSettings()

    # Destroy only needs the recorded state, not the program.
    stack = auto.select_stack(
        stack_name=stack_name,
        project_name=project_name,
        program=lambda: None,
    )
    apply_settings(stack, settings)

    pulumi.log.debug(f'Running destroy for {project_name}/{stack_name}')
    try:
        stack.destroy(on_output=on_output)
    except auto.CommandError as e:
        translated = translate_engine_error(e)
        if translated is e:
            raise
        raise translated from e
