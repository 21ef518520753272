"""
Pulumi mocks shared by the tests.

No real AWS credentials or engine are needed: resources are "created" by
FrontendMocks, which records every registration and invoke in order.
"""

import pulumi
import pytest

ACCOUNT = "123456789012"
ZONE_ID = "Z0EXAMPLE"
DIST_DOMAIN = "d111111abcdef8.cloudfront.net"
CLOUDFRONT_ZONE_ID = "Z2FDTNDATAQYW2"

ZONE_LOOKUP = "aws:route53/getZone:getZone"


class FrontendMocks(pulumi.runtime.Mocks):

    def __init__(self):
        self.created = []
        self.calls = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        inputs = dict(args.inputs)
        self.created.append((args.typ, args.name, inputs))
        outputs = dict(inputs)

        if args.typ == "aws:acm/certificate:Certificate":
            domain = inputs["domainName"]
            outputs.update(
                arn=f"arn:aws:acm:us-east-1:{ACCOUNT}:certificate/{args.name}",
                domainValidationOptions=[{
                    "domainName": domain,
                    "resourceRecordName": f"_3639ac514e785e898d2646601fa951d5.{domain}.",
                    "resourceRecordType": "CNAME",
                    "resourceRecordValue": "_98d2646601fa951d5.acm-validations.aws.",
                }],
            )
        elif args.typ == "aws:route53/record:Record":
            outputs["fqdn"] = inputs.get("name")
        elif args.typ == "aws:cloudfront/distribution:Distribution":
            outputs.update(
                arn=f"arn:aws:cloudfront::{ACCOUNT}:distribution/E1ABCXYZ",
                domainName=DIST_DOMAIN,
                hostedZoneId=CLOUDFRONT_ZONE_ID,
            )
        elif args.typ == "aws:s3/bucket:Bucket":
            outputs.update(
                arn=f"arn:aws:s3:::{inputs['bucket']}",
                bucketDomainName=f"{inputs['bucket']}.s3.amazonaws.com",
            )

        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        self.calls.append((args.token, dict(args.args)))
        if args.token == ZONE_LOOKUP:
            return {"id": ZONE_ID, "zoneId": ZONE_ID, "name": args.args["name"]}
        return {}

    def registered(self, typ, name):
        for index, (created_typ, created_name, inputs) in enumerate(self.created):
            if created_typ == typ and created_name == name:
                return index, inputs
        raise AssertionError(f"{typ} {name!r} was never registered")

    def zone_lookups(self):
        return [call_args for token, call_args in self.calls if token == ZONE_LOOKUP]


@pytest.fixture
def mocks():
    frontend_mocks = FrontendMocks()
    pulumi.runtime.set_mocks(frontend_mocks, preview=False)
    return frontend_mocks
