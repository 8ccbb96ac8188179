"""EC2 compute operations over the signed query API.

Every method here is a thin wrapper: it translates its arguments into the
provider's wire parameter names, picks the decoder for the action, and
hands both to :meth:`QueryClient.execute`.  Return values are the decoded,
read-only records; errors propagate from the pipeline unchanged.
"""

from __future__ import annotations

import base64
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from stratus.aws import decoders
from stratus.aws.canonical import ParamValue, indexed_params
from stratus.aws.decoders import DecodedResponse, Decoder
from stratus.aws.query import QueryClient
from stratus.base.async_support import AsyncMixin
from stratus.base.config import EC2Config, validate_config
from stratus.base.transport import Transport

_basic = decoders.BasicDecoder()


class Compute(AsyncMixin):
    """EC2 compute service.

    Attributes:
        client: Signed query pipeline bound to this credential and endpoint.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | BaseModel,
        transport: Transport | None = None,
    ) -> None:
        """Validate the config and build the query pipeline.

        Args:
            config: ``EC2Config`` or a dict with ``aws_access_key_id``,
                ``aws_secret_access_key`` and optional ``host``, ``port``,
                ``scheme``, ``api_version``, ``timeout``.
            transport: Optional transport adapter (defaults to urllib3).

        Raises:
            ConfigurationError: If credentials are missing or invalid.
        """
        cfg = config if isinstance(config, EC2Config) else validate_config("aws", dict(config))
        assert isinstance(cfg, EC2Config)
        self.client = QueryClient(cfg, transport=transport)

    def _request(
        self, action: str, params: Mapping[str, ParamValue], decoder: Decoder
    ) -> DecodedResponse:
        return self.client.execute(action, params, decoder)

    # ── addresses ─────────────────────────────────────────────────────

    def allocate_address(self) -> DecodedResponse:
        """Acquire an elastic IP address.

        Returns:
            Record with ``publicIp`` and ``requestId``.
        """
        return self._request("AllocateAddress", {}, decoders.AllocateAddress())

    def associate_address(self, instance_id: str, public_ip: str) -> DecodedResponse:
        """Associate an elastic IP address with an instance."""
        return self._request(
            "AssociateAddress",
            {"InstanceId": instance_id, "PublicIp": public_ip},
            _basic,
        )

    def describe_addresses(self, public_ips: Iterable[str] = ()) -> DecodedResponse:
        """Describe all or specified elastic IP addresses.

        Args:
            public_ips: Addresses to describe; all when empty.

        Returns:
            Record with ``addressesSet`` (``publicIp``, ``instanceId`` per item).
        """
        return self._request(
            "DescribeAddresses",
            indexed_params("PublicIp", public_ips),
            decoders.DescribeAddresses(),
        )

    def disassociate_address(self, public_ip: str) -> DecodedResponse:
        return self._request("DisassociateAddress", {"PublicIp": public_ip}, _basic)

    def release_address(self, public_ip: str) -> DecodedResponse:
        """Release an elastic IP address."""
        return self._request("ReleaseAddress", {"PublicIp": public_ip}, _basic)

    # ── key pairs ─────────────────────────────────────────────────────

    def create_key_pair(self, key_name: str) -> DecodedResponse:
        """Create a new key pair.

        Returns:
            Record with ``keyName``, ``keyFingerprint`` and the unencrypted
            PEM ``keyMaterial``.
        """
        return self._request(
            "CreateKeyPair", {"KeyName": key_name}, decoders.CreateKeyPair()
        )

    def delete_key_pair(self, key_name: str) -> DecodedResponse:
        return self._request("DeleteKeyPair", {"KeyName": key_name}, _basic)

    def describe_key_pairs(self, key_names: Iterable[str] = ()) -> DecodedResponse:
        """Describe all or specified key pairs (``keySet``)."""
        return self._request(
            "DescribeKeyPairs",
            indexed_params("KeyName", key_names),
            decoders.DescribeKeyPairs(),
        )

    # ── security groups ───────────────────────────────────────────────

    def create_security_group(self, name: str, description: str) -> DecodedResponse:
        """Create a security group.

        The description is sent as-is; escaping happens once, during
        canonicalization.
        """
        return self._request(
            "CreateSecurityGroup",
            {"GroupName": name, "GroupDescription": description},
            _basic,
        )

    def delete_security_group(self, name: str) -> DecodedResponse:
        return self._request("DeleteSecurityGroup", {"GroupName": name}, _basic)

    def describe_security_groups(self, group_names: Iterable[str] = ()) -> DecodedResponse:
        """Describe all or specified security groups.

        Returns:
            Record with ``securityGroupInfo``; each group has ``ownerId``,
            ``groupName``, ``groupDescription`` and ``ipPermissions``.
        """
        return self._request(
            "DescribeSecurityGroups",
            indexed_params("GroupName", group_names),
            decoders.DescribeSecurityGroups(),
        )

    def authorize_security_group_ingress(
        self, group_name: str, **kwargs: Any
    ) -> DecodedResponse:
        """Add an ingress rule to a security group.

        Supported kwargs:
            ip_protocol, from_port, to_port, cidr_ip,
            source_group_name, source_group_owner_id.
        """
        return self._request(
            "AuthorizeSecurityGroupIngress",
            _ingress_params(group_name, kwargs),
            _basic,
        )

    def revoke_security_group_ingress(
        self, group_name: str, **kwargs: Any
    ) -> DecodedResponse:
        """Remove an ingress rule; takes the same kwargs as authorize."""
        return self._request(
            "RevokeSecurityGroupIngress",
            _ingress_params(group_name, kwargs),
            _basic,
        )

    # ── volumes ───────────────────────────────────────────────────────

    def create_volume(
        self,
        availability_zone: str,
        size: int | None = None,
        snapshot_id: str | None = None,
    ) -> DecodedResponse:
        """Create an EBS volume, empty or from a snapshot.

        Args:
            availability_zone: Zone to create the volume in.
            size: Size in GiB.
            snapshot_id: Snapshot to create the volume from.

        Returns:
            Record with ``volumeId``, ``size``, ``status``, ``createTime``,
            ``availabilityZone`` and ``snapshotId``.
        """
        if size is None and snapshot_id is None:
            raise ValueError("Either size or snapshot_id is required")
        return self._request(
            "CreateVolume",
            {
                "AvailabilityZone": availability_zone,
                "Size": size,
                "SnapshotId": snapshot_id,
            },
            decoders.CreateVolume(),
        )

    def delete_volume(self, volume_id: str) -> DecodedResponse:
        return self._request("DeleteVolume", {"VolumeId": volume_id}, _basic)

    def describe_volumes(self, volume_ids: Iterable[str] = ()) -> DecodedResponse:
        """Describe all or specified volumes.

        Returns:
            Record with ``volumeSet``; each volume carries its
            ``attachmentSet``.
        """
        return self._request(
            "DescribeVolumes",
            indexed_params("VolumeId", volume_ids),
            decoders.DescribeVolumes(),
        )

    def attach_volume(self, volume_id: str, instance_id: str, device: str) -> DecodedResponse:
        """Attach a volume to an instance as *device* (e.g. ``/dev/sdh``)."""
        return self._request(
            "AttachVolume",
            {"VolumeId": volume_id, "InstanceId": instance_id, "Device": device},
            decoders.AttachVolume(),
        )

    def detach_volume(
        self,
        volume_id: str,
        instance_id: str | None = None,
        device: str | None = None,
        force: bool | None = None,
    ) -> DecodedResponse:
        return self._request(
            "DetachVolume",
            {
                "VolumeId": volume_id,
                "InstanceId": instance_id,
                "Device": device,
                "Force": force,
            },
            decoders.AttachVolume(),
        )

    # ── images, zones ─────────────────────────────────────────────────

    def describe_images(
        self,
        image_ids: Iterable[str] = (),
        owner: str | None = None,
        executable_by: str | None = None,
    ) -> DecodedResponse:
        """Describe all or specified images.

        Args:
            image_ids: Image ids to describe.
            owner: Only images belonging to this owner.
            executable_by: Only images this user may launch.
        """
        params: dict[str, ParamValue] = {
            "Owner": owner,
            "ExecutableBy": executable_by,
        }
        params.update(indexed_params("ImageId", image_ids))
        return self._request("DescribeImages", params, decoders.DescribeImages())

    def describe_availability_zones(self, zone_names: Iterable[str] = ()) -> DecodedResponse:
        return self._request(
            "DescribeAvailabilityZones",
            indexed_params("ZoneName", zone_names),
            decoders.DescribeAvailabilityZones(),
        )

    # ── instances ─────────────────────────────────────────────────────

    def describe_instances(self, instance_ids: Iterable[str] = ()) -> DecodedResponse:
        """Describe all or specified instances, grouped by reservation."""
        return self._request(
            "DescribeInstances",
            indexed_params("InstanceId", instance_ids),
            decoders.DescribeInstances(),
        )

    def run_instances(
        self,
        image_id: str,
        min_count: int,
        max_count: int,
        **kwargs: Any,
    ) -> DecodedResponse:
        """Launch instances of an image.

        Supported kwargs:
            availability_zone, instance_type, key_name, security_groups,
            user_data, kernel_id, ramdisk_id, device_name, virtual_name,
            monitoring_enabled.

        Returns:
            The reservation record (``reservationId``, ``ownerId``,
            ``groupSet``, ``instancesSet``).
        """
        params: dict[str, ParamValue] = {
            "ImageId": image_id,
            "MinCount": min_count,
            "MaxCount": max_count,
            "Placement.AvailabilityZone": kwargs.get("availability_zone"),
            "InstanceType": kwargs.get("instance_type"),
            "KeyName": kwargs.get("key_name"),
            "KernelId": kwargs.get("kernel_id"),
            "RamdiskId": kwargs.get("ramdisk_id"),
            "Monitoring.Enabled": kwargs.get("monitoring_enabled"),
        }
        if kwargs.get("user_data") is not None:
            data = kwargs["user_data"]
            if isinstance(data, str):
                data = data.encode("utf-8")
            params["UserData"] = base64.b64encode(data).decode("ascii")
        if kwargs.get("device_name") is not None:
            params["BlockDeviceMapping.1.DeviceName"] = kwargs["device_name"]
            params["BlockDeviceMapping.1.VirtualName"] = kwargs.get("virtual_name")
        params.update(indexed_params("SecurityGroup", kwargs.get("security_groups")))
        return self._request("RunInstances", params, decoders.RunInstances())

    def reboot_instances(self, instance_ids: Iterable[str]) -> DecodedResponse:
        return self._request(
            "RebootInstances", _required_ids("InstanceId", instance_ids), _basic
        )

    def terminate_instances(self, instance_ids: Iterable[str]) -> DecodedResponse:
        """Terminate instances.

        Returns:
            Record with ``instancesSet``; each item has ``instanceId``,
            ``shutdownState`` and ``previousState``.
        """
        return self._request(
            "TerminateInstances",
            _required_ids("InstanceId", instance_ids),
            decoders.TerminateInstances(),
        )


def _required_ids(name: str, values: Iterable[str]) -> dict[str, ParamValue]:
    params = indexed_params(name, values)
    if not params:
        raise ValueError(f"At least one {name} is required")
    return params


def _ingress_params(group_name: str, kwargs: Mapping[str, Any]) -> dict[str, ParamValue]:
    return {
        "GroupName": group_name,
        "IpProtocol": kwargs.get("ip_protocol"),
        "FromPort": kwargs.get("from_port"),
        "ToPort": kwargs.get("to_port"),
        "CidrIp": kwargs.get("cidr_ip"),
        "SourceSecurityGroupName": kwargs.get("source_group_name"),
        "SourceSecurityGroupOwnerId": kwargs.get("source_group_owner_id"),
    }
