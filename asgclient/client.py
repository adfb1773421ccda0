"""Client for the Auto Scaling query API."""

from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Optional, TypeVar
from urllib.parse import urlencode, urlsplit, urlunsplit

from asgclient.models import (
    BlockDeviceMapping,
    CreateAutoScalingGroup,
    CreateLaunchConfiguration,
    DeleteAutoScalingGroup,
    DeleteLaunchConfiguration,
    DescribeAutoScalingGroups,
    DescribeAutoScalingGroupsResp,
    DescribeLaunchConfigurations,
    DescribeLaunchConfigurationsResp,
    SimpleResp,
    UpdateAutoScalingGroup,
    parse_describe_auto_scaling_groups,
    parse_describe_launch_configurations,
    parse_error,
    parse_simple_response,
)
from asgclient.signing import Credentials, sign
from asgclient.transport import RetryingClient, default_client

API_VERSION = "2011-01-01"

T = TypeVar("T")


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _members(name: str, values: Iterable[str]) -> Dict[str, str]:
    return {f"{name}.member.{n}": value for n, value in enumerate(values, start=1)}


def block_device_params(
    prefix: str, block_devices: Iterable[BlockDeviceMapping]
) -> Dict[str, str]:
    """Query parameters describing ``block_devices``, numbered from 1."""
    params: Dict[str, str] = {}
    for number, device in enumerate(block_devices, start=1):
        key = f"{prefix}BlockDeviceMappings.member.{number}."
        if device.device_name:
            params[key + "DeviceName"] = device.device_name
        if device.virtual_name:
            params[key + "VirtualName"] = device.virtual_name
        elif device.no_device:
            params[key + "NoDevice"] = ""
        else:
            if device.snapshot_id:
                params[key + "Ebs.SnapshotId"] = device.snapshot_id
            if device.volume_type:
                params[key + "Ebs.VolumeType"] = device.volume_type
            if device.iops:
                params[key + "Ebs.Iops"] = str(device.iops)
            if device.volume_size:
                params[key + "Ebs.VolumeSize"] = str(device.volume_size)
            params[key + "Ebs.DeleteOnTermination"] = _flag(device.delete_on_termination)
            if device.encrypted:
                params[key + "Ebs.Encrypted"] = "true"
    return params


def _group_settings(options) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for param, value in (
        ("DefaultCooldown", options.default_cooldown),
        ("DesiredCapacity", options.desired_capacity),
        ("HealthCheckGracePeriod", options.health_check_grace_period),
        ("MaxSize", options.max_size),
        ("MinSize", options.min_size),
    ):
        if value is not None:
            params[param] = str(value)
    for param, text in (
        ("HealthCheckType", options.health_check_type),
        ("LaunchConfigurationName", options.launch_configuration_name),
        ("PlacementGroup", options.placement_group),
    ):
        if text:
            params[param] = text
    params.update(_members("AvailabilityZones", options.availability_zones))
    params.update(_members("TerminationPolicies", options.termination_policies))
    if options.vpc_zone_identifier is not None:
        params["VPCZoneIdentifier"] = ",".join(options.vpc_zone_identifier)
    return params


class AutoScaling:
    """Signed GET requests against one Auto Scaling endpoint."""

    def __init__(
        self,
        credentials: Credentials,
        endpoint: str,
        client: Optional[RetryingClient] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.credentials = credentials
        self.endpoint = endpoint
        self.client = client if client is not None else default_client()
        self._clock = clock if clock is not None else (lambda: datetime.now(timezone.utc))

    def _query(
        self, action: str, params: Dict[str, str], parser: Callable[[bytes], T]
    ) -> T:
        parts = urlsplit(self.endpoint)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"invalid endpoint: {self.endpoint!r}")
        timestamp = self._clock().astimezone(timezone.utc)
        request = {
            "Action": action,
            **params,
            "Version": API_VERSION,
            "Timestamp": timestamp.strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        signed = sign(self.credentials, "GET", "/", request, parts.netloc)
        url = urlunsplit(
            (parts.scheme, parts.netloc, parts.path, urlencode(sorted(signed.items())), parts.fragment)
        )
        response = self.client.get(url)
        if response.status_code > 200:
            raise parse_error(response.body, response.status_code, response.status)
        return parser(response.body)

    def create_auto_scaling_group(self, options: CreateAutoScalingGroup) -> SimpleResp:
        """Create an Auto Scaling group."""
        params = {"AutoScalingGroupName": options.name, **_group_settings(options)}
        if options.instance_id:
            params["InstanceId"] = options.instance_id
        params.update(_members("LoadBalancerNames", options.load_balancer_names))
        for number, tag in enumerate(options.tags, start=1):
            key = f"Tags.member.{number}."
            params[key + "Key"] = tag.key
            params[key + "Value"] = tag.value
            params[key + "PropagateAtLaunch"] = _flag(tag.propagate_at_launch)
        return self._query("CreateAutoScalingGroup", params, parse_simple_response)

    def create_launch_configuration(
        self, options: CreateLaunchConfiguration
    ) -> SimpleResp:
        """Create a launch configuration; user data is sent base64-encoded."""
        params = {"LaunchConfigurationName": options.name}
        if options.associate_public_ip_address:
            params["AssociatePublicIpAddress"] = "true"
        for param, text in (
            ("IamInstanceProfile", options.iam_instance_profile),
            ("ImageId", options.image_id),
            ("InstanceType", options.instance_type),
            ("InstanceId", options.instance_id),
            ("KernelId", options.kernel_id),
            ("KeyName", options.key_name),
            ("SpotPrice", options.spot_price),
        ):
            if text:
                params[param] = text
        params.update(_members("SecurityGroups", options.security_groups))
        if options.user_data:
            params["UserData"] = base64.b64encode(
                options.user_data.encode("utf-8")
            ).decode("ascii")
        params.update(block_device_params("", options.block_devices))
        return self._query("CreateLaunchConfiguration", params, parse_simple_response)

    def describe_auto_scaling_groups(
        self, options: DescribeAutoScalingGroups
    ) -> DescribeAutoScalingGroupsResp:
        """Describe the named Auto Scaling groups, or all of them."""
        params = _members("AutoScalingGroupNames", options.names)
        return self._query(
            "DescribeAutoScalingGroups", params, parse_describe_auto_scaling_groups
        )

    def describe_launch_configurations(
        self, options: DescribeLaunchConfigurations
    ) -> DescribeLaunchConfigurationsResp:
        """Describe the named launch configurations, or all of them."""
        params = _members("LaunchConfigurationNames", options.names)
        return self._query(
            "DescribeLaunchConfigurations", params, parse_describe_launch_configurations
        )

    def delete_launch_configuration(
        self, options: DeleteLaunchConfiguration
    ) -> SimpleResp:
        """Delete a launch configuration."""
        params = {"LaunchConfigurationName": options.name}
        return self._query("DeleteLaunchConfiguration", params, parse_simple_response)

    def delete_auto_scaling_group(self, options: DeleteAutoScalingGroup) -> SimpleResp:
        """Delete an Auto Scaling group."""
        params = {
            "AutoScalingGroupName": options.name,
            "ForceDelete": _flag(options.force_delete),
        }
        return self._query("DeleteAutoScalingGroup", params, parse_simple_response)

    def update_auto_scaling_group(self, options: UpdateAutoScalingGroup) -> SimpleResp:
        """Update the settings of an Auto Scaling group that are given."""
        params = _group_settings(options)
        if options.name:
            params["AutoScalingGroupName"] = options.name
        return self._query("UpdateAutoScalingGroup", params, parse_simple_response)