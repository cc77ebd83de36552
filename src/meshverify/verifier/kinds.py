"""Kind to collection name resolution."""

DEPLOYMENT_KIND = "Deployment"
JOB_KIND = "Job"
CRD_KIND = "CustomResourceDefinition"

# Kinds found in Istio control-plane manifests, keyed by kind. Irregular
# plurals must be listed; the rest are here so lookups don't depend on the
# fallback.
KIND_COLLECTIONS: dict[str, str] = {
    # core/v1
    "ConfigMap": "configmaps",
    "Endpoints": "endpoints",
    "LimitRange": "limitranges",
    "Namespace": "namespaces",
    "Pod": "pods",
    "ResourceQuota": "resourcequotas",
    "Secret": "secrets",
    "Service": "services",
    "ServiceAccount": "serviceaccounts",
    # apps, batch, autoscaling, policy
    "DaemonSet": "daemonsets",
    "Deployment": "deployments",
    "StatefulSet": "statefulsets",
    "Job": "jobs",
    "CronJob": "cronjobs",
    "HorizontalPodAutoscaler": "horizontalpodautoscalers",
    "PodDisruptionBudget": "poddisruptionbudgets",
    "PodSecurityPolicy": "podsecuritypolicies",
    # rbac, admission, apiextensions
    "ClusterRole": "clusterroles",
    "ClusterRoleBinding": "clusterrolebindings",
    "Role": "roles",
    "RoleBinding": "rolebindings",
    "MutatingWebhookConfiguration": "mutatingwebhookconfigurations",
    "ValidatingWebhookConfiguration": "validatingwebhookconfigurations",
    "CustomResourceDefinition": "customresourcedefinitions",
    # networking, scheduling, storage
    "Ingress": "ingresses",
    "IngressClass": "ingressclasses",
    "NetworkPolicy": "networkpolicies",
    "EndpointSlice": "endpointslices",
    "PriorityClass": "priorityclasses",
    "RuntimeClass": "runtimeclasses",
    "StorageClass": "storageclasses",
    # Istio
    "AuthorizationPolicy": "authorizationpolicies",
    "DestinationRule": "destinationrules",
    "EnvoyFilter": "envoyfilters",
    "Gateway": "gateways",
    "IstioOperator": "istiooperators",
    "PeerAuthentication": "peerauthentications",
    "ProxyConfig": "proxyconfigs",
    "RequestAuthentication": "requestauthentications",
    "ServiceEntry": "serviceentries",
    "Sidecar": "sidecars",
    "Telemetry": "telemetries",
    "VirtualService": "virtualservices",
    "WasmPlugin": "wasmplugins",
    "WorkloadEntry": "workloadentries",
    "WorkloadGroup": "workloadgroups",
    # Gateway API
    "GatewayClass": "gatewayclasses",
    "GRPCRoute": "grpcroutes",
    "HTTPRoute": "httproutes",
    "ReferenceGrant": "referencegrants",
    "TCPRoute": "tcproutes",
    "TLSRoute": "tlsroutes",
    "UDPRoute": "udproutes",
}


def collection_for_kind(kind: str) -> str:
    """Get the collection name used to address objects of a kind.

    Unknown kinds fall back to the lower-cased kind plus "s".

    Args:
        kind: Object kind, e.g. "NetworkPolicy"

    Returns:
        Plural resource name, e.g. "networkpolicies"
    """
    collection = KIND_COLLECTIONS.get(kind)
    if collection:
        return collection
    return kind.lower() + "s"
