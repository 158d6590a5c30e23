"""Names of the objects making up a hosted control plane."""

# Secrets created by earlier provisioning phases
TOKENS_SECRET = "tokens"
SERVICE_ACCOUNT_KEY_SECRET = "service-account-key"
CA_CERT_SECRET = "ca-cert"
CA_KEY_SECRET = "ca-key"
APISERVER_TLS_SECRET = "apiserver-tls"
KUBELET_CLIENT_CERTIFICATES_SECRET = "kubelet-client-certificates"
CONTROLLER_MANAGER_KUBECONFIG_SECRET = "controllermanager-kubeconfig"
SCHEDULER_KUBECONFIG_SECRET = "scheduler-kubeconfig"
MACHINE_CONTROLLER_KUBECONFIG_SECRET = "machinecontroller-kubeconfig"

# Deployments
APISERVER = "apiserver"
CONTROLLER_MANAGER = "controller-manager"
SCHEDULER = "scheduler"
MACHINE_CONTROLLER = "machine-controller"

# Config maps
CLOUD_CONFIG_CONFIGMAP = "cloud-config"
OPENVPN_CLIENT_CONFIGS_CONFIGMAP = "openvpn-client-configs"
PROMETHEUS_CONFIGMAP = "prometheus"

# Services
APISERVER_INTERNAL_SERVICE = "apiserver"
APISERVER_EXTERNAL_SERVICE = "apiserver-external"
OPENVPN_SERVICE = "openvpn-server"
ETCD_CLIENT_SERVICE = "etcd-client"

APISERVER_SECURE_PORT = 6443
OPENVPN_PORT = 1194

CLOUD_CONFIG_MOUNT_PATH = "/etc/kubernetes/cloud"
KUBECONFIG_MOUNT_PATH = "/etc/kubernetes/kubeconfig"

CLUSTER_API_VERSION = "hostplane.io/v1"
CLUSTER_KIND = "Cluster"
