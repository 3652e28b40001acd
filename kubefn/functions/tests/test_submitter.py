import json
from datetime import datetime, timezone

import httpx
import pytest
import respx

from kubefn.functions.core.exceptions import FetchError, SubmissionError
from kubefn.functions.models import FunctionSpec
from kubefn.functions.services.submitter import DeploymentSubmitter

BASE_URL = "http://control-plane.test"
NOW = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def spec():
    return FunctionSpec(
        name="hello",
        namespace="default",
        handler="handler.hello",
        runtime="python2.7",
        deps="requests==2.18.1",
        description="Says hello",
    )


@pytest.mark.asyncio
@respx.mock
async def test_submit_returns_ack_after_write(control_plane, spec):
    route = respx.put(f"{BASE_URL}/apis/k8s.io/v1/namespaces/default/functions/hello").mock(
        return_value=httpx.Response(200, json={"metadata": {"name": "hello", "resourceVersion": "42"}})
    )

    ack = await DeploymentSubmitter(control_plane, clock=lambda: NOW).submit(spec)

    assert ack.name == "hello"
    assert ack.namespace == "default"
    assert ack.submitted_at == NOW
    assert ack.resource_version == "42"
    body = json.loads(route.calls.last.request.content)
    assert body["spec"]["handler"] == "handler.hello"
    assert body["metadata"]["annotations"]["kubeless.serverless.com/description"] == "Says hello"


@pytest.mark.asyncio
@respx.mock
async def test_submit_uses_spec_namespace(control_plane):
    spec = FunctionSpec(name="hello", namespace="prod", handler="h.hello", runtime="nodejs6")
    route = respx.put(f"{BASE_URL}/apis/k8s.io/v1/namespaces/prod/functions/hello").mock(
        return_value=httpx.Response(200, json={})
    )

    await DeploymentSubmitter(control_plane).submit(spec)

    assert route.called


@pytest.mark.asyncio
@respx.mock
async def test_submit_rejection_is_not_retried(control_plane, spec):
    route = respx.put(f"{BASE_URL}/apis/k8s.io/v1/namespaces/default/functions/hello").mock(
        return_value=httpx.Response(400, json={"message": "spec.runtime: Invalid value"})
    )

    with pytest.raises(SubmissionError) as exc:
        await DeploymentSubmitter(control_plane).submit(spec)

    assert exc.value.code == 400
    assert exc.value.message == "spec.runtime: Invalid value"
    assert "Unable to update the function hello" in str(exc.value)
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_submit_unreachable_control_plane(control_plane, spec):
    respx.put(f"{BASE_URL}/apis/k8s.io/v1/namespaces/default/functions/hello").mock(
        side_effect=httpx.ConnectTimeout("timed out")
    )

    with pytest.raises(FetchError):
        await DeploymentSubmitter(control_plane).submit(spec)
