"""Per-action decoders for the EC2 query API (version 2009-04-04)."""

from __future__ import annotations

from stratus.aws.decoders.base import Decoder

_INSTANCE_INTEGERS = frozenset({"code", "amiLaunchIndex"})
_INSTANCE_SEQUENCES = frozenset({"groupSet", "instancesSet", "productCodes"})


class AllocateAddress(Decoder):
    """``publicIp`` and ``requestId``."""

    required = frozenset({"publicIp"})


class AttachVolume(Decoder):
    """Attachment state returned by ``AttachVolume`` and ``DetachVolume``."""

    timestamps = frozenset({"attachTime"})
    required = frozenset({"volumeId", "status"})


class CreateKeyPair(Decoder):
    required = frozenset({"keyName", "keyFingerprint", "keyMaterial"})


class CreateVolume(Decoder):
    integers = frozenset({"size"})
    timestamps = frozenset({"createTime"})
    required = frozenset({"volumeId"})


class DescribeAddresses(Decoder):
    """``addressesSet``: one record per address (``publicIp``, ``instanceId``)."""

    sequences = frozenset({"addressesSet"})
    required = frozenset({"addressesSet"})


class DescribeAvailabilityZones(Decoder):
    sequences = frozenset({"availabilityZoneInfo", "messageSet"})
    required = frozenset({"availabilityZoneInfo"})


class DescribeImages(Decoder):
    """``imagesSet``: architecture, id, location, owner, state, type, visibility."""

    booleans = frozenset({"isPublic"})
    sequences = frozenset({"imagesSet", "productCodes"})
    required = frozenset({"imagesSet"})


class DescribeInstances(Decoder):
    """``reservationSet`` of reservations, each with ``groupSet`` and ``instancesSet``."""

    integers = _INSTANCE_INTEGERS
    timestamps = frozenset({"launchTime"})
    sequences = _INSTANCE_SEQUENCES | {"reservationSet"}
    required = frozenset({"reservationSet"})


class DescribeKeyPairs(Decoder):
    sequences = frozenset({"keySet"})
    required = frozenset({"keySet"})


class DescribeSecurityGroups(Decoder):
    """``securityGroupInfo`` with nested ``ipPermissions``.

    Each permission carries ``groups`` (user/group pairs) and ``ipRanges``.
    """

    integers = frozenset({"fromPort", "toPort"})
    sequences = frozenset({"securityGroupInfo", "ipPermissions", "groups", "ipRanges"})
    required = frozenset({"securityGroupInfo"})


class DescribeVolumes(Decoder):
    """``volumeSet``, each volume with its ``attachmentSet``."""

    integers = frozenset({"size"})
    timestamps = frozenset({"createTime", "attachTime"})
    sequences = frozenset({"volumeSet", "attachmentSet"})
    required = frozenset({"volumeSet"})


class RunInstances(Decoder):
    """A single reservation: ``reservationId``, ``ownerId``, groups and instances."""

    integers = _INSTANCE_INTEGERS
    timestamps = frozenset({"launchTime"})
    sequences = _INSTANCE_SEQUENCES
    required = frozenset({"reservationId", "instancesSet"})


class TerminateInstances(Decoder):
    """``instancesSet`` with ``shutdownState`` / ``previousState`` per instance."""

    integers = frozenset({"code"})
    sequences = frozenset({"instancesSet"})
    required = frozenset({"instancesSet"})
