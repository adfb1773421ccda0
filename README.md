# asgclient

A compact client for the AWS Auto Scaling query API (version `2011-01-01`).
It builds Signature Version 2 (HMAC-SHA256) signed `GET` requests, sends
them through a retrying HTTP client and decodes the XML replies into
dataclasses. It uses only the standard library.

## Installation

```
pip install .
```

## Usage

```python
from asgclient.client import AutoScaling
from asgclient.signing import Credentials
from asgclient.models import (
    CreateAutoScalingGroup,
    DescribeAutoScalingGroups,
    UpdateAutoScalingGroup,
    Tag,
)

credentials = Credentials(access_key="placeholder", secret_key="secret")
asg = AutoScaling(credentials, "https://autoscaling.us-east-1.amazonaws.com")

asg.create_auto_scaling_group(CreateAutoScalingGroup(
    name="web",
    launch_configuration_name="web-lc",
    availability_zones=["us-east-1a"],
    min_size=2,
    max_size=4,
    tags=[Tag(key="role", value="web", propagate_at_launch=True)],
))

asg.update_auto_scaling_group(UpdateAutoScalingGroup(name="web", desired_capacity=3))

resp = asg.describe_auto_scaling_groups(DescribeAutoScalingGroups(names=["web"]))
for group in resp.auto_scaling_groups:
    print(group.name, group.min_size, group.max_size, group.created_time)
```

`AutoScaling` offers these operations, each taking the options dataclass of
the same name from `asgclient.models`:

| Method | Options | Returns |
| --- | --- | --- |
| `create_auto_scaling_group` | `CreateAutoScalingGroup` | `SimpleResp` |
| `create_launch_configuration` | `CreateLaunchConfiguration` | `SimpleResp` |
| `describe_auto_scaling_groups` | `DescribeAutoScalingGroups` | `DescribeAutoScalingGroupsResp` |
| `describe_launch_configurations` | `DescribeLaunchConfigurations` | `DescribeLaunchConfigurationsResp` |
| `delete_launch_configuration` | `DeleteLaunchConfiguration` | `SimpleResp` |
| `delete_auto_scaling_group` | `DeleteAutoScalingGroup` | `SimpleResp` |
| `update_auto_scaling_group` | `UpdateAutoScalingGroup` | `SimpleResp` |

Notes on the options:

- The numeric group settings (`default_cooldown`, `desired_capacity`,
  `health_check_grace_period`, `max_size`, `min_size`) are sent only when
  they are not `None`, so `0` can be requested explicitly.
- Empty strings and empty lists are left out of the request.
  `vpc_zone_identifier` is sent, comma-joined, whenever it is not `None`.
- `CreateLaunchConfiguration.user_data` is sent base64-encoded.
- Block devices are turned into query parameters by
  `asgclient.client.block_device_params(prefix, block_devices)`, numbered
  from 1.

Each request carries `Action`, `Version`, a UTC `Timestamp` and the signing
fields. `AutoScaling` takes an optional `client` (a `RetryingClient`, the
shared `default_client()` otherwise) and a keyword-only `clock` returning
the current `datetime`.

## Errors

A reply with a status above 200 raises `asgclient.models.AutoScalingError`,
which has `status_code`, `code` and `message`. The code and message come
from the first `<Error>` element of the body; when the body gives no
message, the HTTP status line is used. `str()` of the error is
`"<code>: <message>"`, or `"<status>: <message>"` when there is no code.
A body that is not well-formed XML raises `ValueError` from the parsers.

The decoders are usable on their own: `parse_simple_response`,
`parse_describe_auto_scaling_groups`, `parse_describe_launch_configurations`
and `parse_error(body, status_code, status)`.

## Signing

`asgclient.signing.sign(credentials, method, path, params, host)` returns a
copy of `params` with `AWSAccessKeyId`, `SignatureVersion`,
`SignatureMethod`, `SecurityToken` (when `Credentials.token` is set) and
`Signature` added. `encode(value)` percent-encodes everything but
`A-Z a-z 0-9 - _ . ~`.

## Retrying

`asgclient.transport.RetryingClient.get(url)` returns an `HttpResponse`
(`status_code`, `reason`, `headers`, `body`, plus `status` and `text`).
Error statuses are returned, not raised; a network error is raised when it
is not retried or remains after the last try. The client is configured by
keyword: `timeout` (5 s), `max_tries` (3), `should_retry` (`aws_retry`,
which retries timeouts, reset or aborted connections and 5xx replies) and
`wait` (`exp_backoff`: 100 ms doubled per attempt; `linear_backoff` is also
provided). `default_client()` returns a shared client with these defaults.

`asgclient.attempt.AttemptStrategy(total, delay, min_attempts)` paces a
polling loop, with times in seconds:

```python
from asgclient.attempt import AttemptStrategy

attempt = AttemptStrategy(total=5.0, delay=0.5).start()
while attempt.next():
    if ready():
        break
```

`Attempt.has_next()` tells whether another try will follow, `count` gives
the number of tries begun, and iterating an `Attempt` yields each attempt
number as it becomes due.

## What it does not do

The package covers only the seven operations above. It does not read
credentials from the environment or from files, has no table of regions or
endpoints (pass the endpoint URL yourself), and provides no command-line
tool.

## Tests

```
pip install .[test]
pytest
```