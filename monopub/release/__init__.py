"""Release context: versions, manifests, propagation and publishing.

- semver / resolver: version parsing and the per-package bump policy
- manifest / packages: loading the package set from disk and git
- graph: propagating bumps through internal dependency edges
- registry / publish: querying the registry and running publishes
- service: wiring the above for the CLI
"""

from __future__ import annotations
