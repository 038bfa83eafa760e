"""Request context middleware - binds request id and route to every log line."""

from uuid import uuid4

import falcon.asgi

from adminrbac.logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware:
    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        clear_request_context()
        request_id = req.get_header(REQUEST_ID_HEADER) or str(uuid4())
        req.context.request_id = request_id
        bind_request_context(request_id=request_id, method=req.method, path=req.path)

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        resp.set_header(REQUEST_ID_HEADER, getattr(req.context, "request_id", ""))
        clear_request_context()
