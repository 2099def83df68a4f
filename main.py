import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from loandesk.config.settings import settings
from loandesk.routers import auth, user, hierarchy, task
from loandesk.utils.errors import InvalidAssignment, LoanDeskError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="LoanDesk API")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(LoanDeskError)
async def loandesk_error_handler(request: Request, exc: LoanDeskError):
    """Turn service errors into JSON responses"""
    body = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, InvalidAssignment):
        body["kind"] = exc.kind.value
    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=body)

# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(hierarchy.router, prefix="/admin/hierarchy", tags=["Hierarchy"])
app.include_router(task.router, prefix="/tasks", tags=["Tasks"])

# Root route
@app.get("/")
def read_root():
    return {"message": "LoanDesk API"}

@app.get("/health")
def health():
    return {"status": "ok"}
