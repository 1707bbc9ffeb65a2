"""
Compose Specification Compliance Suite.

Runs every scenario against every tool descriptor in commands/, deploying
the fixtures in deployments/ with the real compose binaries and observing
the deployed target service from outside.

Key Features:
- One test case per (scenario, tool descriptor) pair
- Tool differences expressed only as YAML descriptors
- Leftover-container check after every teardown
- JSON/markdown failure reports with spec references
"""
