# krmkit

Small building blocks for working with Kubernetes resource model (KRM)
objects in Python. It is a library only: it has no command-line program.

## What it provides

- `krmkit.kubeobject`: `parse_kube_object` and `parse_kube_objects` read
  YAML into `KubeObject`s. A `KubeObject` gives `api_version()`, `kind()`,
  `name()`, `namespace()`, `annotations()`, `group_version_kind()`, reads
  nested fields (`nested_get`, `nested_string`, `nested_int`), sets them
  (`set_nested_field`, `set_nested_string`) and writes itself back out
  (`to_dict`, `to_yaml`). `set_nested_field_keep_formatting` replaces a
  field, or the whole object, while keeping comments and field order.
  `KubeObjectExt` (built with `ext_from_kube_object`, `ext_from_yaml` or
  `ext_from_typed_object`) adds `set_spec`, `set_status`,
  `unsafe_set_spec`, `unsafe_set_status` and `set_from_typed_object`.
- `krmkit.lists`: `filter_by_type` splits objects by `GroupVersionKind`
  into plain data of the matches and the remaining objects;
  `get_singleton` returns the one match or raises `ValueError`.
- `krmkit.ref`: `ObjectReference` with `validate_gvk_ref`,
  `validate_gvkn_ref` (both raise `InvalidReferenceError`),
  `is_wildcard_ref`, `get_gvk_ref_from_gvkn_ref`, `is_refs_valid`,
  `is_gvknn_equal` and `get_refs_string`.
- `krmkit.nad`: `NadStruct` reads and edits the CNI configuration held in
  `spec.config` of a NetworkAttachmentDefinition (CNI type, VLAN, master
  interface, bridge settings, IPAM addresses and routes). `NadConfig`
  converts that configuration to and from JSON. Invalid input raises
  `NadError`.
- `krmkit.nfdeploy`: `NfDeployState` gathers interface configs, data
  networks, capacity and dependency references into the network
  instances of an NF deployment, returning them sorted by name.
- `krmkit.templates`: `render_configuration` renders a UERANSIM gNB
  configuration and `render_nad` the JSON list used as the pod networks
  annotation.
- `krmkit.reconcilers`: `parse_reconcilers` splits a comma-separated list;
  `reconciler_is_enabled` checks it for the name or `*`, then the
  `ENABLE_<NAME>` environment variable.

## Installation

```
pip install .
```

## Example

```python
from krmkit.nad import NadStruct

nad = NadStruct.from_yaml("""\
apiVersion: k8s.cni.cncf.io/v1
kind: NetworkAttachmentDefinition
metadata:
  name: upf-n3
""")
nad.set_cni_type("macvlan")
nad.set_nad_master("eth1")
print(nad.cni_type(), nad.nad_master())
print(nad.config_spec())
```

```python
from krmkit.reconcilers import parse_reconcilers, reconciler_is_enabled

names = parse_reconcilers("approval,repository")
reconciler_is_enabled(names, "approval", {})                    # True
reconciler_is_enabled(names, "token", {"ENABLE_TOKEN": "true"}) # True
```

## What it does not do

- It does not run functions over a resource list read from standard
  input; there is no function runner or command.
- It does not start a controller manager or talk to a Kubernetes cluster.
  `krmkit.reconcilers` only decides which reconcilers would be enabled.
- It does not claim IP addresses or VLANs from any backend.

## Running the tests

```
pip install ".[test]"
pytest
```