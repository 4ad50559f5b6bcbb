# fortiexporter

`fortiexporter` collects metrics from FortiGate firewalls through the
FortiOS REST API and renders them in the Prometheus text exposition format.

## Probes

Each probe takes a client and a `TargetMetadata` (the device's FortiOS major
and minor version), queries one API endpoint and returns a list of `Metric`
samples:

| Function                                               | What it reports                                         |
|--------------------------------------------------------|---------------------------------------------------------|
| `probes.bgp.probe_bgp_neighbors_ipv4` / `_ipv6`        | Configured BGP neighbours, state as value               |
| `probes.bgp.probe_bgp_neighbor_paths_ipv4` / `_ipv6`   | Paths and best paths per BGP neighbour                  |
| `probes.ospf.probe_ospf_neighbors`                     | OSPF neighbours, state as value                         |
| `probes.license.probe_license_status`                  | VDOM licences used and available                        |
| `probes.logs.probe_log_current_disk_usage`             | Log disk bytes used and total per VDOM                  |
| `probes.logs.probe_log_analyzer`                       | FortiAnalyzer registration and received log count       |
| `probes.logs.probe_log_analyzer_queue`                 | FortiAnalyzer queue connection, failed and cached logs  |
| `probes.switch.probe_managed_switch`                   | Managed FortiSwitch info, PoE and per-port counters     |

The BGP path probes take a third argument, `max_bgp_paths`: with `0` they
return nothing, and if a VDOM answers with more paths than that they fail.

The BGP and OSPF probes need FortiOS 7.0 or later; for older devices they
return an empty list instead of failing.

A probe whose request fails or whose answer has an unexpected shape raises
`fortiexporter.metrics.ProbeFailed`.

`bgp_state_to_number` and `ospf_state_to_number` give the numeric value of a
state name (unknown BGP states map to 0, unknown OSPF states to 1, "Down").

## Authentication file

Targets are authenticated with REST API tokens, kept in a YAML file that maps
the target URL to its credentials:

```yaml
"https://192.0.2.1":
  token: token
  probes:
    include: []
    exclude: []
```

`fortiexporter.config.parse_auth_keys` turns this text into a dict of
`TargetAuth` values. Only HTTPS targets may use token authentication.

## Configuration

`fortiexporter.config.load_config(argv)` parses these options (each may be
written with one dash or two), reads the files they name and returns an
`ExporterConfig`:

| Option               | Default              | Meaning                                                        |
|----------------------|----------------------|----------------------------------------------------------------|
| `--auth-file`        | `fortigate-key.yaml` | YAML file with the API tokens                                  |
| `--listen`           | `:9710`              | Listen address, stored in the configuration                    |
| `--scrape-timeout`   | `30`                 | Seconds a request may take                                     |
| `--https-timeout`    | `10`                 | Connect/TLS handshake timeout in seconds                       |
| `--insecure`         | off                  | Do not verify certificates                                     |
| `--extra-ca-certs`   | empty                | Comma-separated PEM files to trust in addition to the default bundle |
| `--max-bgp-paths`    | `10000`              | Paths to fetch when counting BGP routes (0 disables)           |
| `--max-vpn-users`    | `0`                  | Stored in the configuration                                    |

A problem reading or parsing the authentication file, or reading or loading an
extra CA file, raises `ConfigError`. `build_parser()` returns the underlying
`argparse` parser.

## Using it from Python

```python
from fortiexporter.config import load_config
from fortiexporter.client import configure_session, new_forti_client
from fortiexporter.metrics import TargetMetadata, render_text
from fortiexporter.probes.license import probe_license_status

config = load_config(["--auth-file", "fortigate-key.yaml"])
session = configure_session(config)
client = new_forti_client("https://192.0.2.1", session, config)

meta = TargetMetadata(version_major=7, version_minor=2)
print(render_text(probe_license_status(client, meta)))
```

`configure_session` returns a `requests.Session` with the timeouts and TLS
settings of the configuration. `new_forti_client` raises `FortiAPIError` when
the target has no token or is not HTTPS; `FortiTokenClient.get` raises it when
the request fails, the status is not 200 or the body is not JSON.

`render_text` writes families sorted by name and samples sorted by label
values, and raises `ValueError` if the same sample is given twice.
`get_build_info` and `build_info_metric` produce the
`fortigate_exporter_build_info` sample.

`fortiexporter.version.parse_version("v6.4.4")` returns `(6, 4)` and raises
`ValueError` for strings that do not start with `v<major>.<minor>.`.

## What it does not do

- There is no command and no HTTP server: nothing serves `/metrics` or a
  probe endpoint. The `--listen` option is only stored.
- Nothing runs a set of probes per target; the `include` and `exclude` lists
  of the authentication file are parsed but not applied.
- There are no probes for firewall IP pools, load balancers or policy
  counters, and none for VPN users.