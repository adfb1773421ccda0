"""Auto Scaling records, request options, responses and XML decoding."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union

Body = Union[bytes, str]

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_RFC3339 = re.compile(
    r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Records returned by the service


@dataclass
class Tag:
    """A tag on an Auto Scaling group."""

    key: str = ""
    value: str = ""
    propagate_at_launch: bool = False


@dataclass
class BlockDeviceMapping:
    """The association of a block device with an image."""

    device_name: str = ""
    virtual_name: str = ""
    snapshot_id: str = ""
    volume_type: str = ""
    volume_size: int = 0
    delete_on_termination: bool = False
    encrypted: bool = False
    no_device: bool = False
    iops: int = 0


@dataclass
class LaunchConfiguration:
    """A launch configuration as described by the service."""

    associate_public_ip_address: bool = False
    iam_instance_profile: str = ""
    image_id: str = ""
    instance_type: str = ""
    kernel_id: str = ""
    key_name: str = ""
    spot_price: str = ""
    name: str = ""
    security_groups: List[str] = field(default_factory=list)
    user_data: bytes = b""
    block_devices: List[BlockDeviceMapping] = field(default_factory=list)


@dataclass
class Instance:
    """An instance that belongs to an Auto Scaling group."""

    availability_zone: str = ""
    health_status: str = ""
    instance_id: str = ""
    launch_configuration_name: str = ""
    lifecycle_state: str = ""


@dataclass
class AutoScalingGroup:
    """An Auto Scaling group as described by the service."""

    availability_zones: List[str] = field(default_factory=list)
    created_time: Optional[datetime] = None
    default_cooldown: int = 0
    desired_capacity: int = 0
    health_check_grace_period: int = 0
    health_check_type: str = ""
    instance_id: str = ""
    instances: List[Instance] = field(default_factory=list)
    launch_configuration_name: str = ""
    load_balancer_names: List[str] = field(default_factory=list)
    max_size: int = 0
    min_size: int = 0
    name: str = ""
    status: str = ""
    tags: List[Tag] = field(default_factory=list)
    vpc_zone_identifier: str = ""
    termination_policies: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Request options


@dataclass
class CreateAutoScalingGroup:
    """Options for creating an Auto Scaling group; ``None`` sizes are not sent."""

    name: str = ""
    availability_zones: List[str] = field(default_factory=list)
    default_cooldown: Optional[int] = None
    desired_capacity: Optional[int] = None
    health_check_grace_period: Optional[int] = None
    health_check_type: str = ""
    instance_id: str = ""
    launch_configuration_name: str = ""
    load_balancer_names: List[str] = field(default_factory=list)
    max_size: Optional[int] = None
    min_size: Optional[int] = None
    placement_group: str = ""
    termination_policies: List[str] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    vpc_zone_identifier: Optional[List[str]] = None


@dataclass
class CreateLaunchConfiguration:
    """Options for creating a launch configuration."""

    name: str = ""
    associate_public_ip_address: bool = False
    iam_instance_profile: str = ""
    image_id: str = ""
    instance_id: str = ""
    instance_type: str = ""
    kernel_id: str = ""
    key_name: str = ""
    spot_price: str = ""
    security_groups: List[str] = field(default_factory=list)
    user_data: str = ""
    block_devices: List[BlockDeviceMapping] = field(default_factory=list)


@dataclass
class DescribeAutoScalingGroups:
    """Names of the groups to describe; empty means all."""

    names: List[str] = field(default_factory=list)


@dataclass
class DescribeLaunchConfigurations:
    """Names of the launch configurations to describe; empty means all."""

    names: List[str] = field(default_factory=list)


@dataclass
class DeleteLaunchConfiguration:
    """Options for deleting a launch configuration."""

    name: str = ""


@dataclass
class DeleteAutoScalingGroup:
    """Options for deleting an Auto Scaling group."""

    name: str = ""
    force_delete: bool = False


@dataclass
class UpdateAutoScalingGroup:
    """Options for updating an Auto Scaling group; unset fields are not sent."""

    name: str = ""
    availability_zones: List[str] = field(default_factory=list)
    default_cooldown: Optional[int] = None
    desired_capacity: Optional[int] = None
    health_check_grace_period: Optional[int] = None
    health_check_type: str = ""
    launch_configuration_name: str = ""
    max_size: Optional[int] = None
    min_size: Optional[int] = None
    placement_group: str = ""
    termination_policies: List[str] = field(default_factory=list)
    vpc_zone_identifier: Optional[List[str]] = None


# ---------------------------------------------------------------------------
# Responses


@dataclass
class SimpleResp:
    """A response that carries only its request id."""

    request_id: str = ""


@dataclass
class DescribeAutoScalingGroupsResp:
    """Result of describing Auto Scaling groups."""

    request_id: str = ""
    auto_scaling_groups: List[AutoScalingGroup] = field(default_factory=list)


@dataclass
class DescribeLaunchConfigurationsResp:
    """Result of describing launch configurations."""

    request_id: str = ""
    launch_configurations: List[LaunchConfiguration] = field(default_factory=list)


class AutoScalingError(Exception):
    """An error reported by the Auto Scaling service."""

    def __init__(self, status_code: int = 0, code: str = "", message: str = "") -> None:
        super().__init__(status_code, code, message)
        self.status_code = status_code
        self.code = code
        self.message = message

    def __str__(self) -> str:
        if self.code:
            prefix = f"{self.code}: "
        elif self.status_code > 0:
            prefix = f"{self.status_code}: "
        else:
            prefix = ""
        return prefix + self.message


# ---------------------------------------------------------------------------
# XML decoding


def _parse_root(body: Body) -> ET.Element:
    try:
        root = ET.fromstring(body.lstrip())
    except ET.ParseError as exc:
        raise ValueError(f"malformed XML response: {exc}") from exc
    for element in root.iter():
        if isinstance(element.tag, str) and "}" in element.tag:
            element.tag = element.tag.split("}", 1)[1]
    return root


def _own_text(element: ET.Element) -> str:
    return (element.text or "") + "".join(child.tail or "" for child in element)


def _last(parent: ET.Element, path: str) -> Optional[ET.Element]:
    matches = parent.findall(path)
    return matches[-1] if matches else None


def _str(parent: ET.Element, path: str) -> str:
    element = _last(parent, path)
    return "" if element is None else _own_text(element)


def _int(parent: ET.Element, path: str) -> int:
    text = _str(parent, path).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"invalid integer {text!r} in <{path}>") from None


def _bool(parent: ET.Element, path: str) -> bool:
    text = _str(parent, path).strip()
    if not text or text in _FALSE:
        return False
    if text in _TRUE:
        return True
    raise ValueError(f"invalid boolean {text!r} in <{path}>")


def _strings(parent: ET.Element, path: str) -> List[str]:
    return [_own_text(element) for element in parent.findall(path)]


def _time(parent: ET.Element, path: str) -> Optional[datetime]:
    element = _last(parent, path)
    if element is None:
        return None
    text = _own_text(element).strip()
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid timestamp {text!r} in <{path}>")
    moment = datetime.strptime(match[1], "%Y-%m-%dT%H:%M:%S")
    micro = int((match[2] or "0")[:6].ljust(6, "0"))
    zone = match[3]
    if zone.upper() == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return moment.replace(microsecond=micro, tzinfo=tz)


def _tag(element: ET.Element) -> Tag:
    return Tag(
        key=_str(element, "Key"),
        value=_str(element, "Value"),
        propagate_at_launch=_bool(element, "PropagateAtLaunch"),
    )


def _block_device(element: ET.Element) -> BlockDeviceMapping:
    return BlockDeviceMapping(
        device_name=_str(element, "DeviceName"),
        virtual_name=_str(element, "VirtualName"),
        snapshot_id=_str(element, "Ebs/SnapshotId"),
        volume_type=_str(element, "Ebs/VolumeType"),
        volume_size=_int(element, "Ebs/VolumeSize"),
        delete_on_termination=_bool(element, "Ebs/DeleteOnTermination"),
        encrypted=_bool(element, "Ebs/Encrypted"),
        no_device=_bool(element, "NoDevice"),
        iops=_int(element, "ebs/iops"),
    )


def _launch_configuration(element: ET.Element) -> LaunchConfiguration:
    return LaunchConfiguration(
        associate_public_ip_address=_bool(element, "AssociatePublicIpAddress"),
        iam_instance_profile=_str(element, "IamInstanceProfile"),
        image_id=_str(element, "ImageId"),
        instance_type=_str(element, "InstanceType"),
        kernel_id=_str(element, "KernelId"),
        key_name=_str(element, "KeyName"),
        spot_price=_str(element, "SpotPrice"),
        name=_str(element, "LaunchConfigurationName"),
        security_groups=_strings(element, "SecurityGroups/member"),
        user_data=_str(element, "UserData").encode("utf-8"),
        block_devices=[
            _block_device(member)
            for member in element.findall("BlockDeviceMappings/member")
        ],
    )


def _instance(element: ET.Element) -> Instance:
    return Instance(
        availability_zone=_str(element, "AvailabilityZone"),
        health_status=_str(element, "HealthStatus"),
        instance_id=_str(element, "InstanceId"),
        launch_configuration_name=_str(element, "LaunchConfigurationName"),
        lifecycle_state=_str(element, "LifecycleState"),
    )


def _auto_scaling_group(element: ET.Element) -> AutoScalingGroup:
    return AutoScalingGroup(
        availability_zones=_strings(element, "AvailabilityZones/member"),
        created_time=_time(element, "CreatedTime"),
        default_cooldown=_int(element, "DefaultCooldown"),
        desired_capacity=_int(element, "DesiredCapacity"),
        health_check_grace_period=_int(element, "HealthCheckGracePeriod"),
        health_check_type=_str(element, "HealthCheckType"),
        instance_id=_str(element, "InstanceId"),
        instances=[_instance(m) for m in element.findall("Instances/member")],
        launch_configuration_name=_str(element, "LaunchConfigurationName"),
        load_balancer_names=_strings(element, "LoadBalancerNames/member"),
        max_size=_int(element, "MaxSize"),
        min_size=_int(element, "MinSize"),
        name=_str(element, "AutoScalingGroupName"),
        status=_str(element, "Status"),
        tags=[_tag(m) for m in element.findall("Tags/member")],
        vpc_zone_identifier=_str(element, "VPCZoneIdentifier"),
        termination_policies=_strings(element, "TerminationPolicies/member"),
    )


def parse_simple_response(body: Body) -> SimpleResp:
    """Decode a response that carries only ``ResponseMetadata/RequestId``."""
    root = _parse_root(body)
    return SimpleResp(request_id=_str(root, "ResponseMetadata/RequestId"))


def parse_describe_auto_scaling_groups(body: Body) -> DescribeAutoScalingGroupsResp:
    """Decode a DescribeAutoScalingGroups response."""
    root = _parse_root(body)
    return DescribeAutoScalingGroupsResp(
        request_id=_str(root, "ResponseMetadata/RequestId"),
        auto_scaling_groups=[
            _auto_scaling_group(member)
            for member in root.findall(
                "DescribeAutoScalingGroupsResult/AutoScalingGroups/member"
            )
        ],
    )


def parse_describe_launch_configurations(
    body: Body,
) -> DescribeLaunchConfigurationsResp:
    """Decode a DescribeLaunchConfigurations response."""
    root = _parse_root(body)
    return DescribeLaunchConfigurationsResp(
        request_id=_str(root, "ResponseMetadata/RequestId"),
        launch_configurations=[
            _launch_configuration(member)
            for member in root.findall(
                "DescribeLaunchConfigurationsResult/LaunchConfigurations/member"
            )
        ],
    )


def parse_error(body: Body, status_code: int, status: str) -> AutoScalingError:
    """Build the error for a failed reply, falling back to the status line."""
    code = ""
    message = ""
    try:
        root = _parse_root(body)
    except ValueError:
        root = None
    if root is not None:
        errors = root.findall("Error")
        if errors:
            code = _str(errors[0], "Code")
            message = _str(errors[0], "Message")
    return AutoScalingError(status_code=status_code, code=code, message=message or status)