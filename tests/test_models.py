from datetime import datetime, timezone

import pytest

from asgclient.models import (
    AutoScalingError,
    parse_describe_auto_scaling_groups,
    parse_describe_launch_configurations,
    parse_error,
    parse_simple_response,
)

ERROR_DUMP = """
<?xml version="1.0" encoding="UTF-8"?>
<Response><Errors><Error><Code>UnsupportedOperation</Code>
<Message></Message>
</Error></Errors><RequestID>0503f4e9-bbd6-483c-b54f-c4ae9f3b30f4</RequestID></Response>
"""

CREATE_AUTO_SCALING_GROUP_EXAMPLE = """
<CreateAutoScalingGroupResponse xmlns="http://autoscaling.amazonaws.com/doc/2011-01-01/">
<ResponseMetadata>
<RequestId>8d798a29-f083-11e1-bdfb-cb223EXAMPLE</RequestId>
</ResponseMetadata>
</CreateAutoScalingGroupResponse>
"""

DELETE_LAUNCH_CONFIGURATION_EXAMPLE = """<DeleteLaunchConfigurationResponse xmlns="http://autoscaling.amazonaws.com/doc/2011-01-01/">
  <ResponseMetadata>
    <RequestId>7347261f-97df-11e2-8756-35eEXAMPLE</RequestId>
  </ResponseMetadata>
</DeleteLaunchConfigurationResponse>"""

DESCRIBE_LAUNCH_CONFIGURATIONS_EXAMPLE = """
<DescribeLaunchConfigurationsResponse xmlns="http://autoscaling.amazonaws.com/doc/2011-01-01/">
  <DescribeLaunchConfigurationsResult>
    <LaunchConfigurations>
      <member>
        <AssociatePublicIpAddress>true</AssociatePublicIpAddress>
        <SecurityGroups/>
        <PlacementTenancy>dedicated</PlacementTenancy>
        <CreatedTime>2013-01-21T23:04:42.200Z</CreatedTime>
        <KernelId/>
        <LaunchConfigurationName>my-test-lc</LaunchConfigurationName>
        <UserData/>
        <InstanceType>m1.small</InstanceType>
        <LaunchConfigurationARN>arn:aws:autoscaling:us-east-1:123456789012:launchConfiguration:
        00000000-0000-0000-0000-000000000000:launchConfigurationName/my-test-lc</LaunchConfigurationARN>
        <BlockDeviceMappings/>
        <ImageId>ami-514ac838</ImageId>
        <KeyName/>
        <RamdiskId/>
        <InstanceMonitoring>
          <Enabled>true</Enabled>
        </InstanceMonitoring>
        <EbsOptimized>false</EbsOptimized>
      </member>
    </LaunchConfigurations>
  </DescribeLaunchConfigurationsResult>
  <ResponseMetadata>
    <RequestId>d05a22f8-b690-11e2-bf8e-2113fEXAMPLE</RequestId>
  </ResponseMetadata>
</DescribeLaunchConfigurationsResponse>
"""

DESCRIBE_AUTO_SCALING_GROUPS_EXAMPLE = """
<DescribeAutoScalingGroupsResponse xmlns="http://autoscaling.amazonaws.com/doc/2011-01-01/">
<DescribeAutoScalingGroupsResult>
    <AutoScalingGroups>
      <member>
        <Tags/>
        <SuspendedProcesses/>
        <AutoScalingGroupName>my-test-asg-lbs</AutoScalingGroupName>
        <HealthCheckType>ELB</HealthCheckType>
        <CreatedTime>2013-05-06T17:47:15.107Z</CreatedTime>
        <EnabledMetrics/>
        <LaunchConfigurationName>my-test-lc</LaunchConfigurationName>
        <Instances/>
        <DesiredCapacity>2</DesiredCapacity>
        <AvailabilityZones>
          <member>us-east-1b</member>
          <member>us-east-1a</member>
        </AvailabilityZones>
        <LoadBalancerNames>
          <member>my-test-asg-loadbalancer</member>
        </LoadBalancerNames>
        <MinSize>2</MinSize>
        <VPCZoneIdentifier/>
        <HealthCheckGracePeriod>120</HealthCheckGracePeriod>
        <DefaultCooldown>300</DefaultCooldown>
        <AutoScalingGroupARN>arn:aws:autoscaling:us-east-1:123456789012:autoScalingGroup:00000000-0000-0000-0000-000000000000
        :autoScalingGroupName/my-test-asg-lbs</AutoScalingGroupARN>
        <TerminationPolicies>
          <member>Default</member>
        </TerminationPolicies>
        <MaxSize>10</MaxSize>
      </member>
    </AutoScalingGroups>
  </DescribeAutoScalingGroupsResult>
  <ResponseMetadata>
    <RequestId>0f02a07d-b677-11e2-9eb0-dd50EXAMPLE</RequestId>
  </ResponseMetadata>
</DescribeAutoScalingGroupsResponse>
"""


def test_simple_response_request_id():
    resp = parse_simple_response(CREATE_AUTO_SCALING_GROUP_EXAMPLE)
    assert resp.request_id == "8d798a29-f083-11e1-bdfb-cb223EXAMPLE"


def test_simple_response_from_bytes():
    resp = parse_simple_response(DELETE_LAUNCH_CONFIGURATION_EXAMPLE.encode())
    assert resp.request_id == "7347261f-97df-11e2-8756-35eEXAMPLE"


def test_describe_auto_scaling_groups():
    resp = parse_describe_auto_scaling_groups(DESCRIBE_AUTO_SCALING_GROUPS_EXAMPLE)
    assert resp.request_id == "0f02a07d-b677-11e2-9eb0-dd50EXAMPLE"
    assert len(resp.auto_scaling_groups) == 1
    group = resp.auto_scaling_groups[0]
    assert group.name == "my-test-asg-lbs"
    assert group.launch_configuration_name == "my-test-lc"
    assert group.termination_policies == ["Default"]
    assert group.availability_zones == ["us-east-1b", "us-east-1a"]
    assert group.load_balancer_names == ["my-test-asg-loadbalancer"]
    assert (group.min_size, group.max_size, group.desired_capacity) == (2, 10, 2)
    assert group.health_check_grace_period == 120
    assert group.default_cooldown == 300
    assert group.health_check_type == "ELB"
    assert group.tags == []
    assert group.instances == []
    assert group.vpc_zone_identifier == ""


def test_created_time_is_parsed():
    group = parse_describe_auto_scaling_groups(
        DESCRIBE_AUTO_SCALING_GROUPS_EXAMPLE
    ).auto_scaling_groups[0]
    assert group.created_time == datetime(
        2013, 5, 6, 17, 47, 15, 107000, tzinfo=timezone.utc
    )


def test_describe_launch_configurations():
    resp = parse_describe_launch_configurations(DESCRIBE_LAUNCH_CONFIGURATIONS_EXAMPLE)
    assert resp.request_id == "d05a22f8-b690-11e2-bf8e-2113fEXAMPLE"
    config = resp.launch_configurations[0]
    assert config.instance_type == "m1.small"
    assert config.name == "my-test-lc"
    assert config.image_id == "ami-514ac838"
    assert config.associate_public_ip_address is True
    assert config.security_groups == []
    assert config.user_data == b""
    assert config.kernel_id == ""
    assert config.block_devices == []


def test_group_with_members_and_tags():
    body = """<R><DescribeAutoScalingGroupsResult><AutoScalingGroups><member>
    <Tags><member><Key>env</Key><Value>prod</Value>
    <PropagateAtLaunch>true</PropagateAtLaunch></member></Tags>
    <Instances><member><InstanceId>i-1</InstanceId>
    <LifecycleState>InService</LifecycleState></member></Instances>
    </member></AutoScalingGroups></DescribeAutoScalingGroupsResult></R>"""
    group = parse_describe_auto_scaling_groups(body).auto_scaling_groups[0]
    assert group.tags[0].key == "env"
    assert group.tags[0].value == "prod"
    assert group.tags[0].propagate_at_launch is True
    assert group.instances[0].instance_id == "i-1"
    assert group.instances[0].lifecycle_state == "InService"
    assert group.created_time is None


def test_launch_configuration_block_devices():
    body = """<R><DescribeLaunchConfigurationsResult><LaunchConfigurations><member>
    <BlockDeviceMappings><member><DeviceName>/dev/sdb</DeviceName>
    <Ebs><SnapshotId>snap-1</SnapshotId><VolumeSize>8</VolumeSize>
    <DeleteOnTermination>true</DeleteOnTermination></Ebs></member></BlockDeviceMappings>
    </member></LaunchConfigurations></DescribeLaunchConfigurationsResult></R>"""
    config = parse_describe_launch_configurations(body).launch_configurations[0]
    device = config.block_devices[0]
    assert device.device_name == "/dev/sdb"
    assert device.snapshot_id == "snap-1"
    assert device.volume_size == 8
    assert device.delete_on_termination is True
    assert device.no_device is False


def test_malformed_xml_raises():
    with pytest.raises(ValueError):
        parse_simple_response("<unclosed>")


def test_bad_integer_raises():
    body = (
        "<R><DescribeAutoScalingGroupsResult><AutoScalingGroups><member>"
        "<MinSize>lots</MinSize></member></AutoScalingGroups>"
        "</DescribeAutoScalingGroupsResult></R>"
    )
    with pytest.raises(ValueError, match="lots"):
        parse_describe_auto_scaling_groups(body)


def test_bad_boolean_raises():
    body = (
        "<R><DescribeLaunchConfigurationsResult><LaunchConfigurations><member>"
        "<AssociatePublicIpAddress>maybe</AssociatePublicIpAddress></member>"
        "</LaunchConfigurations></DescribeLaunchConfigurationsResult></R>"
    )
    with pytest.raises(ValueError, match="maybe"):
        parse_describe_launch_configurations(body)


def test_parse_error_reads_code_and_message():
    body = (
        "<ErrorResponse><Error><Type>Sender</Type><Code>ValidationError</Code>"
        "<Message>bad input</Message></Error><RequestId>r-1</RequestId></ErrorResponse>"
    )
    error = parse_error(body, 400, "400 Bad Request")
    assert error.code == "ValidationError"
    assert error.message == "bad input"
    assert error.status_code == 400
    assert str(error) == "ValidationError: bad input"


def test_parse_error_falls_back_to_status():
    error = parse_error(ERROR_DUMP, 400, "400 Bad Request")
    assert error.code == ""
    assert error.message == "400 Bad Request"
    assert str(error) == "400: 400 Bad Request"


def test_parse_error_with_garbage_body():
    error = parse_error(b"not xml", 503, "503 Service Unavailable")
    assert error.message == "503 Service Unavailable"
    assert error.status_code == 503


def test_error_str_without_code_or_status():
    assert str(AutoScalingError(message="boom")) == "boom"