from __future__ import annotations

# Local git reads (git show)
GIT_TIMEOUT_SECONDS = 30.0

# Registry version queries (npm view)
REGISTRY_TIMEOUT_SECONDS = 60.0

# Idempotent registry read retry policy
REGISTRY_READ_RETRY_ATTEMPTS = 3
REGISTRY_READ_RETRY_DELAY_SECONDS = 1.0
