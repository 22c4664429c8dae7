from fastapi import FastAPI

from .api.router import router as api_router
from .db import init_app_db

app = FastAPI(title="Subscription CRM")
init_app_db()
app.include_router(api_router, prefix="/api")

@app.get("/ping")
def ping():
    return {"message": "pong"}
