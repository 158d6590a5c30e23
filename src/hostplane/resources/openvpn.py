"""OpenVPN client config map and service.

The VPN connects the hosted control plane with the tenant's nodes; the
client config routes the node access network through the VPN.
"""

import ipaddress
from typing import Any

from hostplane.resources.common import config_map, service
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import (
    OPENVPN_CLIENT_CONFIGS_CONFIGMAP,
    OPENVPN_PORT,
    OPENVPN_SERVICE,
)

USER_CLUSTER_CLIENT = "user-cluster-client"


def config_map_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the OpenVPN client configs ConfigMap."""
    network = ipaddress.ip_network(context.node_access_network, strict=False)
    route = f"iroute {network.network_address} {network.netmask}\n"
    return config_map(OPENVPN_CLIENT_CONFIGS_CONFIGMAP, context, {USER_CLUSTER_CLIENT: route})


def service_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the NodePort Service of the OpenVPN server."""
    return service(
        OPENVPN_SERVICE,
        context,
        "NodePort",
        ports=[
            {"name": "secure", "port": OPENVPN_PORT, "protocol": "TCP", "targetPort": OPENVPN_PORT},
        ],
        selector={"app": OPENVPN_SERVICE},
    )
