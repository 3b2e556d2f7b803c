"""
Local Round-Trip Example

This example runs one trigger and its callback against in-process fake
services:
1. A storage adapter answering every series with three points
2. A transformation service that accepts the bundle and sums the inputs
3. The callback writing the computed total back to storage

Run: python examples/01-local-roundtrip/main.py
"""

import asyncio
import json

import httpx

from extension_transformation import AppSettings, Extension, FunctionResponse, create_relay

EXTENSION = {
    "extensionId": "ext-001",
    "extension": "Transformation",
    "function": "AggregateAccumulative",
    "data": {
        "inputVariables": ["rain"],
        "outputVariables": ["total"],
        "variables": [
            {"variableId": "rain", "timeseries": {"timeseriesId": "ts-rain", "valueType": "Scalar"}},
            {"variableId": "total", "timeseries": {"timeseriesId": "ts-total", "valueType": "Scalar"}},
        ],
    },
    "options": {"window": 3600},
}

# Bundles received by the fake transformation service
received: list[dict] = []


def fake_services(request: httpx.Request) -> httpx.Response:
    """Answer as a storage adapter or a transformation service."""
    if request.url.host.startswith("adapter-"):
        if request.method == "GET":
            return httpx.Response(
                200,
                json=[{"time": f"2024-01-01T0{h}:00:00Z", "value": float(h)} for h in range(3)],
            )
        print(f"  adapter saved {request.url.path}: {request.content.decode()}")
        return httpx.Response(200, json={})

    received.append(json.loads(request.content))
    print(f"  transformation received {request.url}")
    return httpx.Response(200, json={"message": "OK"})


async def main():
    relay = create_relay(AppSettings(), transport=httpx.MockTransport(fake_services))

    print("Trigger:")
    token = await relay.trigger(Extension.from_json(json.dumps(EXTENSION)), "start=2024-01-01")

    # What the transformation service would post back to /callback/{token}
    bundle = received[0]
    total = sum(p["value"] for v in bundle["inputVariables"] for p in v["data"])
    outputs = [
        {**v, "data": [{"time": "2024-01-01T03:00:00Z", "value": total}]}
        for v in bundle["outputVariables"]
    ]
    response = FunctionResponse.model_validate({**bundle, "outputVariables": outputs})

    print(f"Callback {token}:")
    written = await relay.callback(token, response)
    print(f"Saved {written} output(s)")

    await relay.close()


if __name__ == "__main__":
    asyncio.run(main())
