import logging
from contextlib import asynccontextmanager
from islandhr.cron_jobs import scheduler

import uvicorn

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from islandhr.routers import (auth, employee_management, holidays, insurance,
                              leave_balance, leave_management)
from islandhr.config import settings

PROD_MODE = settings.PRODUCTION_MODE


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Start cron job scheduler
    scheduler.start()
    yield
    scheduler.shutdown(wait=False)


app = FastAPI(title=settings.PROJECT_TITLE, lifespan=lifespan)

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(holidays.router, prefix="/holidays", tags=["holidays"])
app.include_router(employee_management.router, prefix="/employee-management", tags=["employee_management"])
app.include_router(leave_management.router, prefix="/leave-management", tags=["leave_management"])
app.include_router(leave_balance.router, prefix="/leave-balance", tags=["leave_balance"])
app.include_router(insurance.router, prefix="/insurance", tags=["insurance"])

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
)


@app.get("/")
def index():
    return {"message": "Hello Island HR"}


def run():
    # Reload only outside production
    uvicorn.run("islandhr.main:app", host="0.0.0.0", port=11000, reload=not PROD_MODE)


if __name__ == "__main__":
    run()
