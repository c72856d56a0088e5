from fastapi import FastAPI
from app.config import settings
from app.database import SessionLocal, init_db
from app.api import routes
from app.services.scheduler import SchedulerService, build_scanner, configure_logging

configure_logging(settings.debug)

# Initialize database
init_db()

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug
)

# Include routers
app.include_router(routes.router)

scheduler_service = SchedulerService(
    build_scanner(settings, SessionLocal),
    interval_minutes=settings.reminder_interval_minutes,
    timezone=settings.reminder_timezone,
)


@app.on_event("startup")
async def startup_event():
    """Start background scheduler on app startup"""
    if settings.scheduler_enabled:
        scheduler_service.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Stop background scheduler on app shutdown"""
    scheduler_service.stop()


@app.get("/")
def read_root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "health": "/health",
        "sms_webhook": "/sms/reply"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
