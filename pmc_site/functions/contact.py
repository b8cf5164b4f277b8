"""
    Contact form as a standalone request handler, for serverless platforms that run an
    ASGI app per request. The store client is opened and closed inside each request.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.responses import RedirectResponse, Response

from pmc_site.config import config_instance, Settings
from pmc_site.dispatch import NotificationDispatcher, DispatchFailed, ValidationFailed
from pmc_site.forms import parse_form
from pmc_site.utils.my_logger import init_logger, log_submission

function_logger = init_logger("contact-function")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_contact_function(settings: Settings | None = None,
                            dispatcher: NotificationDispatcher | None = None) -> FastAPI:
    if settings is None:
        settings = config_instance()
    if dispatcher is None:
        dispatcher = NotificationDispatcher.from_settings(settings, shared_store=False)
    contact_path = settings.CONTACT_PATH

    app = FastAPI(title="PMC Website - Contact", docs_url=None, openapi_url=None, redoc_url=None)

    @app.exception_handler(ValidationFailed)
    async def validation_error_handler(request: Request, exc: ValidationFailed):
        function_logger.warning(f"Contact Form Rejected : {exc.message}")
        return JSONResponse(content={"error": "Missing required fields"}, status_code=exc.status_code)

    @app.exception_handler(DispatchFailed)
    async def dispatch_error_handler(request: Request, exc: DispatchFailed):
        function_logger.error(f"""
        Error processing form

        Debug Information
            request_url: {request.url}
            saved: {exc.outcome.saved}
            emailed: {exc.outcome.emailed}
            error_detail: {exc.message}
        """)
        return RedirectResponse(url=f"{contact_path}?error=true", status_code=302)

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        """every response from the handler carries permissive cross origin headers"""
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.api_route("/", methods=ALL_METHODS, include_in_schema=False)
    @app.api_route("/api/contact", methods=ALL_METHODS, include_in_schema=False)
    async def contact_handler(request: Request):
        if request.method == "OPTIONS":
            return Response(status_code=200)

        if request.method != "POST":
            return JSONResponse(content={"error": "Method not allowed"}, status_code=405)

        form = parse_form(await request.body())
        log_submission(function_logger, form)
        await run_in_threadpool(dispatcher.dispatch, form)
        return RedirectResponse(url=f"{contact_path}?sent=true", status_code=302)

    return app


app = create_contact_function()
