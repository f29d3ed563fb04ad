# carwatch/main.py
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError

from .api.routes import malformed_body, router
from .pipeline import Pipeline
from .scheduler import start_scheduler


def create_app(pipeline: Pipeline | None = None, run_on_startup: bool = True) -> FastAPI:
    app = FastAPI(title="carwatch")
    app.state.pipeline = pipeline or Pipeline()
    app.state.scheduler = None
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, malformed_body)

    if run_on_startup:
        @app.on_event("startup")
        async def bootstrap():
            # Playwright sync API must not run on the event loop thread
            await run_in_threadpool(app.state.pipeline.startup)
            app.state.scheduler = start_scheduler(app.state.pipeline)

        @app.on_event("shutdown")
        def stop_scheduler():
            if app.state.scheduler is not None:
                app.state.scheduler.shutdown(wait=False)

    return app


app = create_app()
