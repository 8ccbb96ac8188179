"""Response decoders for the EC2 query API.

Each action binds one decoder instance explicitly; see
:mod:`stratus.aws.compute`.
"""

from .base import (
    BasicDecoder,
    DecodedResponse,
    Decoder,
    ErrorDecoder,
    fault_from_record,
    parse_time,
)
from .ec2 import (
    AllocateAddress,
    AttachVolume,
    CreateKeyPair,
    CreateVolume,
    DescribeAddresses,
    DescribeAvailabilityZones,
    DescribeImages,
    DescribeInstances,
    DescribeKeyPairs,
    DescribeSecurityGroups,
    DescribeVolumes,
    RunInstances,
    TerminateInstances,
)

__all__ = [
    "AllocateAddress",
    "AttachVolume",
    "BasicDecoder",
    "CreateKeyPair",
    "CreateVolume",
    "DecodedResponse",
    "Decoder",
    "DescribeAddresses",
    "DescribeAvailabilityZones",
    "DescribeImages",
    "DescribeInstances",
    "DescribeKeyPairs",
    "DescribeSecurityGroups",
    "DescribeVolumes",
    "ErrorDecoder",
    "RunInstances",
    "TerminateInstances",
    "fault_from_record",
    "parse_time",
]
