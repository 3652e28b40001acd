import httpx
import pytest

from kubefn.functions.client import ControlPlaneClient

BASE_URL = "http://control-plane.test"
SERVICES_URL = f"{BASE_URL}/api/v1/namespaces/default/services"
FUNCTIONS_URL = f"{BASE_URL}/apis/k8s.io/v1/namespaces/default/functions"
INGRESSES_URL = f"{BASE_URL}/apis/extensions/v1beta1/namespaces/default/ingresses"


class Manifests:
    """Builders for control plane JSON items."""

    @staticmethod
    def service(name, function=None, cluster_ip="10.0.0.1", namespace="default"):
        labels = {"function": function} if function else {}
        return {
            "metadata": {
                "name": name,
                "namespace": namespace,
                "labels": labels,
                "selfLink": f"/api/v1/namespaces/{namespace}/services/{name}",
                "uid": f"svc-uid-{name}",
                "creationTimestamp": "2024-01-01T00:00:00Z",
            },
            "spec": {
                "clusterIP": cluster_ip,
                "type": "ClusterIP",
                "ports": [{"name": "http", "protocol": "TCP", "port": 8080, "targetPort": 8080}],
            },
        }

    @staticmethod
    def function(
        name,
        ready=True,
        updated="2024-01-01T00:00:10Z",
        namespace="default",
        conditions=True,
    ):
        item = {
            "apiVersion": "k8s.io/v1",
            "kind": "Function",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "labels": {"function": name},
                "annotations": {"kubeless.serverless.com/description": f"{name} function"},
                "selfLink": f"/apis/k8s.io/v1/namespaces/{namespace}/functions/{name}",
                "uid": f"fn-uid-{name}",
                "creationTimestamp": "2024-01-01T00:00:00Z",
            },
            "spec": {
                "handler": f"handler.{name}",
                "runtime": "python2.7",
                "deps": "requests",
                "type": "HTTP",
            },
        }
        if conditions:
            item["status"] = {
                "conditions": [
                    {
                        "type": "Ready",
                        "status": "True" if ready else "False",
                        "lastTransitionTime": updated,
                    }
                ]
            }
        return item

    @staticmethod
    def ingress(function, ip="1.2.3.4", path=None, name=None):
        return {
            "metadata": {"name": name or f"{function}-ingress", "labels": {"function": function}},
            "status": {"loadBalancer": {"ingress": [{"ip": ip}] if ip else []}},
            "spec": {"rules": [{"http": {"paths": [{"path": path or f"/{function}"}]}}]},
        }

    @staticmethod
    def collection(*items):
        return {"items": list(items)}


@pytest.fixture
def manifests():
    return Manifests


@pytest.fixture
def control_plane():
    """ControlPlaneClient bound to the mocked API server."""
    return ControlPlaneClient(httpx.AsyncClient(base_url=BASE_URL), namespace="default")
