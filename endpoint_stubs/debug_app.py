"""Read-only FastAPI app for inspecting a stub session while debugging."""

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .exceptions import EndpointNotFound, ServiceNotFound
from .session import StubSession


class EndpointResponse(BaseModel):
    id: str
    verb: str
    uri_template: str
    route_params: list[str]


class ServiceResponse(BaseModel):
    id: str
    uri: str
    endpoints: list[EndpointResponse]


class RecordResponse(BaseModel):
    service_id: str
    endpoint_id: str
    verb: str
    uri: str
    recorded_at: str
    recorded_from: str
    responded_at: Optional[str] = None


class SubscriptionResponse(BaseModel):
    service_id: str
    endpoint_id: str
    verb: str
    kind: str


def _service_response(service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        uri=service.uri,
        endpoints=[
            EndpointResponse(
                id=endpoint.id,
                verb=endpoint.verb.value,
                uri_template=endpoint.uri_template,
                route_params=endpoint.route_params,
            )
            for endpoint in service.endpoints
        ],
    )


def create_debug_app(session: StubSession) -> FastAPI:
    """Build an app exposing the services, recordings and subscriptions of session."""
    app = FastAPI(
        title="Endpoint Stubs",
        description="Registered services and recorded stubs",
        version="0.1.0",
    )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "services": len(session.services)}

    @app.get("/services", response_model=list[ServiceResponse])
    async def list_services():
        return [_service_response(service) for service in session.services]

    @app.get("/services/{service_id}", response_model=ServiceResponse)
    async def get_service(service_id: str):
        try:
            service = session.services.find_or_raise(service_id)
        except ServiceNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        return _service_response(service)

    @app.get(
        "/services/{service_id}/endpoints/{endpoint_id}/requests",
        response_model=list[RecordResponse],
    )
    async def list_requests(service_id: str, endpoint_id: str):
        try:
            service = session.services.find_or_raise(service_id)
            service.endpoints.find_or_raise(endpoint_id)
        except (ServiceNotFound, EndpointNotFound) as e:
            raise HTTPException(status_code=404, detail=str(e))
        return [RecordResponse(**record.to_dict()) for record in session.requests_for(service_id, endpoint_id)]

    @app.get("/subscriptions", response_model=list[SubscriptionResponse])
    async def list_subscriptions():
        return [
            SubscriptionResponse(
                service_id=subscription.service_id,
                endpoint_id=subscription.endpoint_id,
                verb=subscription.verb.value,
                kind=subscription.kind.value,
            )
            for subscription in session.subscriptions
        ]

    return app
