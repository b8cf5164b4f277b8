import contextlib

from fastapi import FastAPI, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from pmc_site.config import config_instance, Settings
from pmc_site.dispatch import NotificationDispatcher, DispatchFailed, ValidationFailed
from pmc_site.forms import parse_form
from pmc_site.static import resolve_asset, read_asset, NOT_FOUND_HTML
from pmc_site.static.resolver import is_within_public, error_code
from pmc_site.utils.my_logger import init_logger, log_submission

# used to logging debug information for the application
app_logger = init_logger("pmc_website")

ASSET_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(settings: Settings | None = None, dispatcher: NotificationDispatcher | None = None) -> FastAPI:
    """
    **create_app**
        long running site server, POST {CONTACT_PATH} dispatches the contact form and
        every other request is answered from the public directory.

        a single store client is shared by all requests, it is pinged on startup and closed on shutdown
    :param settings: defaults to config_instance()
    :param dispatcher: defaults to a dispatcher built from settings
    :return: FastAPI application
    """
    if settings is None:
        settings = config_instance()
    if dispatcher is None:
        dispatcher = NotificationDispatcher.from_settings(settings, shared_store=True)
    contact_path = settings.CONTACT_PATH

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI):
        if dispatcher.store is not None:
            try:
                await run_in_threadpool(dispatcher.store.ping)
                app_logger.info("Connected to MongoDB")
            except Exception as e:
                app_logger.error(f"MongoDB connection error : {e}")
        app_logger.info(f"Serving files from : {settings.SITE_ROOT}/public")
        yield
        if dispatcher.store is not None:
            dispatcher.store.close()

    app = FastAPI(
        title="PMC Website",
        version="1.0.0",
        docs_url=None,
        openapi_url=None,
        redoc_url=None,
        lifespan=lifespan
    )

    # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # #
    # # # # # # # # # # # # # # ERROR HANDLERS
    # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # #

    @app.exception_handler(ValidationFailed)
    async def validation_error_handler(request: Request, exc: ValidationFailed):
        app_logger.warning(f"""
        Contact Form Rejected

        Debug Information
            request_url: {request.url}
            request_method: {request.method}
            error_detail: {exc.message}
        """)
        return RedirectResponse(url=f"{contact_path}?error=true", status_code=302)

    @app.exception_handler(DispatchFailed)
    async def dispatch_error_handler(request: Request, exc: DispatchFailed):
        app_logger.error(f"""
        Error processing form

        Debug Information
            request_url: {request.url}
            request_method: {request.method}
            saved: {exc.outcome.saved}
            emailed: {exc.outcome.emailed}
            error_detail: {exc.message}
        """)
        return RedirectResponse(url=f"{contact_path}?error=true", status_code=302)

    # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # #
    # # # # # # # # # # # # # # CONTACT FORM
    # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # #

    @app.post(contact_path, include_in_schema=False)
    async def submit_contact(request: Request):
        """
        **submit_contact**
            stores and emails the submitted form then redirects back to the contact page
        :param request:
        :return:
        """
        try:
            form = parse_form(await request.body())
            log_submission(app_logger, form)
            await run_in_threadpool(dispatcher.dispatch, form)
        except (ValidationFailed, DispatchFailed):
            raise
        except Exception as e:
            app_logger.error(f"""
            Error processing form

            Debug Information
                request_url: {request.url}
                request_method: {request.method}
                error_detail: {type(e).__name__}: {e}
            """)
            return RedirectResponse(url=f"{contact_path}?error=true", status_code=302)
        return RedirectResponse(url=f"{contact_path}?sent=true", status_code=302)

    # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # #
    # # # # # # # # # # # # # # STATIC ASSETS
    # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # # #

    # noinspection PyUnusedLocal
    @app.api_route("/{path:path}", methods=ASSET_METHODS, include_in_schema=False)
    async def serve_asset(request: Request, path: str):
        resolution = resolve_asset(request.url.path, site_root=settings.SITE_ROOT)
        if not is_within_public(resolution, site_root=settings.SITE_ROOT):
            app_logger.warning(f"Path outside public directory : {request.url.path}")
            return HTMLResponse(content=NOT_FOUND_HTML, status_code=404)

        try:
            content = await run_in_threadpool(read_asset, resolution)
        except FileNotFoundError:
            return HTMLResponse(content=NOT_FOUND_HTML, status_code=404)
        except OSError as e:
            app_logger.error(f"Error reading {resolution.file_path} : {e}")
            return PlainTextResponse(content=f"Sorry, check with the site admin for error: {error_code(e)}",
                                     status_code=500)

        return Response(content=content, status_code=200, media_type=resolution.content_type)

    return app


app = create_app()
