from fastapi import FastAPI

from gst_invoice.api.routes import router as root_router
from gst_invoice.api.v1 import v1_router
from gst_invoice.config.settings import settings
from gst_invoice.core.logging_config import setup_logging

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)


@app.on_event("startup")
async def startup():
    setup_logging()


app.include_router(root_router)
app.include_router(v1_router)
