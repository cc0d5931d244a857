# helpdesk/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helpdesk.core.config import get_settings
from helpdesk.core.database import Base, engine
from helpdesk.core.logging_config import configure_logging
from helpdesk.core.middleware import install_error_handling
from helpdesk.ticket.routes import router as ticket_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
)

# Error boundary first so CORS stays the outermost layer
install_error_handling(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Trace-Id"],
)

# Routers
app.include_router(ticket_router)

@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
