"""Hosted control-plane compiler (hostplane).

Compile the control-plane workloads and worker machines of tenant Kubernetes
clusters, and guard the seed/datacenter topology they are compiled against.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
