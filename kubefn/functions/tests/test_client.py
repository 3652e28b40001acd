import json

import httpx
import pytest
import respx

from kubefn.functions.client import ControlPlaneClient
from kubefn.functions.config import KubefnConfig
from kubefn.functions.core.exceptions import FetchError, SubmissionError

BASE_URL = "http://control-plane.test"
FUNCTIONS_URL = f"{BASE_URL}/apis/k8s.io/v1/namespaces/default/functions"


def test_collection_url_uses_configured_prefixes():
    cfg = KubefnConfig(
        NAMESPACE="team-a",
        CORE_API_PREFIX="/core/",
        FUNCTIONS_API_PREFIX="/fn",
        EXTENSIONS_API_PREFIX="/ext",
    )
    client = ControlPlaneClient.from_config(httpx.AsyncClient(base_url=BASE_URL), cfg)

    assert client.collection_url("services") == "/core/namespaces/team-a/services"
    assert client.collection_url("functions", "other") == "/fn/namespaces/other/functions"
    assert client.collection_url("ingresses") == "/ext/namespaces/team-a/ingresses"


@pytest.mark.asyncio
@respx.mock
async def test_list_services_parses_records(control_plane, manifests):
    respx.get(f"{BASE_URL}/api/v1/namespaces/default/services").mock(
        return_value=httpx.Response(
            200, json=manifests.collection(manifests.service("f", function="f"))
        )
    )

    services = await control_plane.list_services()

    assert len(services) == 1
    assert services[0].name == "f"
    assert services[0].labels == {"function": "f"}
    assert services[0].ports[0]["targetPort"] == 8080


@pytest.mark.asyncio
@respx.mock
async def test_list_handles_missing_items(control_plane):
    respx.get(f"{BASE_URL}/apis/extensions/v1beta1/namespaces/default/ingresses").mock(
        return_value=httpx.Response(200, json={"kind": "IngressList"})
    )

    assert await control_plane.list_ingresses() == []


@pytest.mark.asyncio
@respx.mock
async def test_get_function_returns_none_on_404(control_plane):
    respx.get(f"{FUNCTIONS_URL}/missing").mock(
        return_value=httpx.Response(404, json={"kind": "Status", "message": "not found"})
    )

    assert await control_plane.get_function("missing") is None


@pytest.mark.asyncio
@respx.mock
async def test_get_function_server_error_is_transient(control_plane):
    respx.get(f"{FUNCTIONS_URL}/f").mock(return_value=httpx.Response(503, text="unavailable"))

    with pytest.raises(FetchError) as exc:
        await control_plane.get_function("f")

    assert exc.value.status_code == 503
    assert exc.value.transient is True


@pytest.mark.asyncio
@respx.mock
async def test_get_function_connection_error_is_transient(control_plane):
    respx.get(f"{FUNCTIONS_URL}/f").mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(FetchError) as exc:
        await control_plane.get_function("f")

    assert exc.value.status_code is None
    assert exc.value.transient is True


@pytest.mark.asyncio
@respx.mock
async def test_put_function_sends_full_manifest(control_plane, manifests):
    body = manifests.function("f")
    route = respx.put(f"{FUNCTIONS_URL}/f").mock(return_value=httpx.Response(200, json=body))

    result = await control_plane.put_function(body)

    assert result["metadata"]["name"] == "f"
    sent = json.loads(route.calls.last.request.content)
    assert sent == body


@pytest.mark.asyncio
@respx.mock
async def test_put_function_rejection_keeps_code_and_message(control_plane, manifests):
    respx.put(f"{FUNCTIONS_URL}/f").mock(
        return_value=httpx.Response(
            403,
            json={"kind": "Status", "code": 403, "message": 'functions "f" is forbidden'},
        )
    )

    with pytest.raises(SubmissionError) as exc:
        await control_plane.put_function(manifests.function("f"))

    assert exc.value.code == 403
    assert exc.value.message == 'functions "f" is forbidden'


@pytest.mark.asyncio
@respx.mock
async def test_put_function_plain_text_rejection(control_plane, manifests):
    respx.put(f"{FUNCTIONS_URL}/f").mock(return_value=httpx.Response(422, text="bad spec"))

    with pytest.raises(SubmissionError) as exc:
        await control_plane.put_function(manifests.function("f"))

    assert exc.value.code == 422
    assert exc.value.message == "bad spec"


@pytest.mark.asyncio
@respx.mock
async def test_list_functions_skips_malformed_items(control_plane, manifests, caplog):
    broken = manifests.function("g", updated="not-a-timestamp")
    respx.get(FUNCTIONS_URL).mock(
        return_value=httpx.Response(
            200, json=manifests.collection(manifests.function("f"), broken, "garbage")
        )
    )

    with caplog.at_level("WARNING", logger="kubefn.client"):
        functions = await control_plane.list_functions()

    assert [f.name for f in functions] == ["f"]
    assert "Skipping malformed item g in functions" in caplog.text


@pytest.mark.asyncio
@respx.mock
async def test_get_function_malformed_item_is_fetch_error(control_plane, manifests):
    respx.get(f"{FUNCTIONS_URL}/g").mock(
        return_value=httpx.Response(200, json=manifests.function("g", updated="not-a-timestamp"))
    )

    with pytest.raises(FetchError) as exc:
        await control_plane.get_function("g")

    assert exc.value.collection == "functions"
    assert "malformed function g" in str(exc.value)
